from __future__ import annotations

import re
import string

from ..errors import InvalidCharacter, InvalidLength

FILLER = "<"
ICAO_ALPHABET = frozenset(string.ascii_uppercase + string.digits + FILLER)
MRZ_LINE_RE = re.compile(r"^[A-Z0-9<]*$")


def validate_characters(line: str, line_index: int) -> None:
    if MRZ_LINE_RE.match(line):
        return
    for column, char in enumerate(line):
        if char not in ICAO_ALPHABET:
            raise InvalidCharacter(line_index, column, char)


def slice_field(line: str, start: int, end: int, *, line_index: int = 0) -> str:
    """Return ``line[start:end]``; a line too short for the range is an error."""
    if len(line) < end:
        raise InvalidLength(expected=end, found=len(line), line=line_index)
    return line[start:end]


def strip_filler(value: str) -> str:
    return value.rstrip(FILLER)


def is_filler(value: str) -> bool:
    return all(char == FILLER for char in value)
