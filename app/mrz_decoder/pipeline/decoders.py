from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import InvalidCharacter, InvalidCheckDigit, InvalidDate, InvalidName, InvalidSex
from ..schemas import Sex
from .charset import FILLER, is_filler, strip_filler

MRZ_DATE_RE = re.compile(r"^\d{6}$")
NAME_SEPARATOR = FILLER * 2
BIRTH = "birth"
EXPIRY = "expiry"

SEX_CODES = {
    "M": Sex.MALE,
    "F": Sex.FEMALE,
    "X": Sex.UNSPECIFIED,
    FILLER: Sex.UNSPECIFIED,
}


@dataclass(frozen=True)
class DocumentNumber:
    value: str
    # Characters the check digit is computed over and the check digit itself.
    check_input: str
    check_char: str
    # Optional data left over once an extended number has been taken out.
    remainder: Optional[str] = None


def decode_code(raw: str) -> str:
    return strip_filler(raw)


def decode_text(raw: str) -> Optional[str]:
    return strip_filler(raw) or None


def decode_name(raw: str, *, field: str = "name") -> Tuple[str, List[str]]:
    """Split an MRZ name field into the primary and secondary identifiers.

    ``ERIKSSON<<ANNA<MARIA<<<`` becomes ``("ERIKSSON", ["ANNA", "MARIA"])``.
    Fillers inside the surname become spaces (``VAN<DER<MEER`` -> ``VAN DER MEER``).
    """
    if is_filler(raw):
        return "", []
    if any(char.isdigit() for char in raw):
        raise InvalidName(raw, field)
    if NAME_SEPARATOR not in raw:
        raise InvalidName(raw, field)
    primary, _, secondary = raw.partition(NAME_SEPARATOR)
    surname = primary.replace(FILLER, " ").strip()
    given_names = [part for part in secondary.split(FILLER) if part]
    return surname, given_names


def infer_year(yy: int, month: int, day: int, *, role: str, reference: dt.date, expiry_past_window: int = 50) -> int:
    """Best-effort century for a two-digit year.

    A two-digit year is ambiguous on its own; this anchors it to ``reference``.
    Birth dates never land after the reference date. Expiry dates stay in the
    reference century unless that puts them more than ``expiry_past_window``
    years back, in which case they move to the next century.
    """
    year = reference.year - reference.year % 100 + yy
    if role == BIRTH:
        if (year, month, day) > (reference.year, reference.month, reference.day):
            year -= 100
    elif year < reference.year - expiry_past_window:
        year += 100
    return year


def decode_date(
    raw: str,
    *,
    field: str,
    role: str,
    reference: Optional[dt.date] = None,
    expiry_past_window: int = 50,
) -> dt.date:
    if not MRZ_DATE_RE.match(raw):
        raise InvalidDate(field, raw)
    yy = int(raw[0:2])
    month = int(raw[2:4])
    day = int(raw[4:6])
    if not 1 <= month <= 12:
        raise InvalidDate(field, raw)
    year = infer_year(
        yy,
        month,
        day,
        role=role,
        reference=reference or dt.date.today(),
        expiry_past_window=expiry_past_window,
    )
    try:
        return dt.date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(field, raw) from exc


def decode_sex(raw: str, *, field: str = "sex") -> Sex:
    try:
        return SEX_CODES[raw]
    except KeyError:
        raise InvalidSex(raw, field) from None


def decode_country(raw: str, *, field: str, line: int = 0, start: int = 0) -> str:
    """Issuing state or nationality; kept opaque apart from the character set.

    Letters only, padded on the right with filler (``D<<``).
    """
    code = strip_filler(raw)
    for offset, char in enumerate(code):
        if char.isdigit() or char == FILLER:
            raise InvalidCharacter(line, start + offset, char, field)
    return code


def decode_document_number(
    raw: str,
    check_char: str,
    extension: Optional[str] = None,
    *,
    field: str = "document_number",
) -> DocumentNumber:
    """Document number with its check digit.

    When the layout allows it and the check position holds filler, the number
    runs on into ``extension`` up to the first filler there; the last character
    of that run is the check digit of the whole number, and the filler ending
    the run separates it from the optional data that follows.
    """
    if check_char != FILLER or extension is None:
        return DocumentNumber(strip_filler(raw), raw, check_char, extension)
    run = extension.split(FILLER, 1)[0]
    if len(run) < 2:
        raise InvalidCheckDigit(field, found=check_char)
    number = raw + run[:-1]
    return DocumentNumber(strip_filler(number), number, run[-1], extension[len(run) + 1 :])
