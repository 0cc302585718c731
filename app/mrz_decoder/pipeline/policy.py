"""Per-field checksum policy and the options a single parse runs with."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional

from dateutil import parser as date_parser

from ..config import CONFIG, ParserConfig


class ChecksumMode(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True)
class ChecksumPolicy:
    """Which check-digit failures abort a parse.

    STRICT raises ``InvalidCheckDigit`` on mismatch. LENIENT keeps the decoded
    value and records ``False`` in the record's ``checks``. A check character
    that is not a digit is fatal under both modes.
    """

    document_number: ChecksumMode = ChecksumMode.STRICT
    birth_date: ChecksumMode = ChecksumMode.STRICT
    expiry_date: ChecksumMode = ChecksumMode.STRICT
    optional_data: ChecksumMode = ChecksumMode.STRICT
    composite: ChecksumMode = ChecksumMode.STRICT

    @classmethod
    def uniform(cls, mode: ChecksumMode) -> "ChecksumPolicy":
        return cls(**{slot.name: mode for slot in fields(cls)})

    @classmethod
    def strict(cls) -> "ChecksumPolicy":
        return cls.uniform(ChecksumMode.STRICT)

    @classmethod
    def lenient(cls) -> "ChecksumPolicy":
        return cls.uniform(ChecksumMode.LENIENT)

    def mode_for(self, slot: str) -> ChecksumMode:
        return getattr(self, slot)

    def is_fatal(self, slot: str) -> bool:
        return self.mode_for(slot) is ChecksumMode.STRICT


def parse_reference_date(value: Optional[str]) -> Optional[dt.date]:
    if not value:
        return None
    try:
        return date_parser.parse(value, yearfirst=True).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"invalid reference date {value!r}") from exc


@dataclass(frozen=True)
class ParseOptions:
    checksums: ChecksumPolicy = field(default_factory=ChecksumPolicy)
    # Anchor for two-digit year inference; None means today.
    reference_date: Optional[dt.date] = None
    normalize_case: bool = False
    expiry_past_window: int = 50

    @classmethod
    def from_config(cls, config: ParserConfig = CONFIG.parser) -> "ParseOptions":
        return cls(
            checksums=ChecksumPolicy.uniform(ChecksumMode(config.checksum_mode)),
            reference_date=parse_reference_date(config.reference_date),
            normalize_case=config.normalize_case,
            expiry_past_window=config.expiry_past_window,
        )

    def today(self) -> dt.date:
        return self.reference_date or dt.date.today()
