"""ICAO 9303 check digits: weights 7, 3, 1 repeating, modulo 10."""

from __future__ import annotations

from typing import Optional

from ..errors import InvalidCharacter, InvalidCheckDigit
from .charset import FILLER

WEIGHTS = (7, 3, 1)


def char_value(char: str, position: int = 0) -> int:
    """Numeric value of an MRZ character.

    A character outside the alphabet raises ``InvalidCharacter`` whose position
    is ``(0, position)``: relative to the value being checked, not to the MRZ.
    """
    if char.isdigit() and char.isascii():
        return int(char)
    if char == FILLER:
        return 0
    if "A" <= char <= "Z":
        return ord(char) - ord("A") + 10
    raise InvalidCharacter(0, position, char)


def compute(value: str) -> int:
    """Check digit of ``value``; see ``char_value`` for the error position."""
    total = 0
    for i, char in enumerate(value):
        total += char_value(char, i) * WEIGHTS[i % 3]
    return total % 10


def verify(value: str, expected: str, *, field_name: Optional[str] = None) -> bool:
    """Return whether ``expected`` is the check digit of ``value``.

    A mismatch is reported as ``False`` so the caller can decide whether it is
    fatal; an ``expected`` that is not a digit at all is always an error.
    """
    if len(expected) != 1 or not expected.isdigit() or not expected.isascii():
        raise InvalidCheckDigit(field_name, found=expected)
    return compute(value) == int(expected)
