from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent
LOGGER = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _load_env_file() -> None:
    # First .env found wins; variables already in the environment are kept.
    for env_path in (BASE_DIR.parents[1] / ".env", Path.cwd() / ".env"):
        if env_path.is_file():
            LOGGER.debug("Loading settings from %s", env_path)
            load_dotenv(env_path, override=False)
            return


_load_env_file()


@dataclass(frozen=True)
class ParserConfig:
    # "strict" or "lenient"; applies to every check digit unless overridden per call.
    checksum_mode: str = os.getenv("MRZ_CHECKSUM_MODE", "strict").lower()
    normalize_case: bool = _env_flag("MRZ_NORMALIZE_CASE")
    # Pins century inference; empty means "today".
    reference_date: Optional[str] = os.getenv("MRZ_REFERENCE_DATE") or None
    expiry_past_window: int = int(os.getenv("MRZ_EXPIRY_PAST_WINDOW", "50"))


@dataclass(frozen=True)
class AppConfig:
    log_level: str = os.getenv("MRZ_LOG_LEVEL", "INFO").upper()
    parser: ParserConfig = field(default_factory=ParserConfig)


CONFIG = AppConfig()
