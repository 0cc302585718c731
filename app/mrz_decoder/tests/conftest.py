import datetime as dt
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mrz_decoder.pipeline.policy import ChecksumPolicy, ParseOptions  # noqa: E402

REFERENCE_DATE = dt.date(2024, 1, 1)

TD3_LINES = [
    "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<",
    "L898902C36UTO7408122F1204159ZE184226B<<<<<10",
]
TD3_FILLER_LINES = [
    "P<CANMARTIN<<SARAH<<<<<<<<<<<<<<<<<<<<<<<<<<",
    "ZE000509<9CAN8501019F2301147<<<<<<<<<<<<<<08",
]
TD1_LINES = [
    "I<UTOCA00000AA4<<<<<<<<<<<<<<<",
    "7408122F1204159UTO<<<<<<<<<<<2",
    "ERIKSSON<<ANNA<MARIA<<<<<<<<<<",
]
TD1_EXTENDED_LINES = [
    "I<UTOD23145890<7349<<<<<<<<<<<",
    "7408122F1204159UTO<<<<<<<<<<<6",
    "ERIKSSON<<ANNA<MARIA<<<<<<<<<<",
]


@pytest.fixture()
def options() -> ParseOptions:
    return ParseOptions(reference_date=REFERENCE_DATE)


@pytest.fixture()
def lenient_options() -> ParseOptions:
    return ParseOptions(checksums=ChecksumPolicy.lenient(), reference_date=REFERENCE_DATE)


@pytest.fixture()
def td3_text() -> str:
    return "\n".join(TD3_LINES)


@pytest.fixture()
def td1_text() -> str:
    return "\n".join(TD1_LINES)
