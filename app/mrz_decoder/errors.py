"""Decode failures raised by the MRZ pipeline.

Every failure is a ``DecodeError``; callers that only care whether a parse
succeeded can catch the base class, while diagnostics use ``code``/``field``.
"""

from __future__ import annotations

from typing import Dict, Optional


class DecodeError(ValueError):
    """Base error for an MRZ that could not be decoded."""

    code = "decode_error"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_payload(self) -> Dict[str, Optional[str]]:
        return {"code": self.code, "message": self.message, "field": self.field}


class UnrecognizedLayout(DecodeError):
    """Raised when the input matches neither the TD1 nor the TD3 layout."""

    code = "unrecognized_layout"

    def __init__(self, message: str = "unrecognized MRZ layout") -> None:
        super().__init__(message)


class InvalidLength(DecodeError):
    code = "invalid_length"

    def __init__(self, expected: int, found: int, line: int) -> None:
        super().__init__(f"line {line + 1}: expected {expected} characters, found {found}")
        self.expected = expected
        self.found = found
        self.line = line


class InvalidCharacter(DecodeError):
    code = "invalid_character"

    def __init__(self, line: int, column: int, char: str, field: Optional[str] = None) -> None:
        super().__init__(f"invalid character {char!r} at line {line + 1}, column {column + 1}", field)
        self.line = line
        self.column = column
        self.char = char

    @property
    def position(self) -> tuple:
        return (self.line, self.column)


class InvalidCheckDigit(DecodeError):
    """Raised for a non-digit check character or a mismatch under strict mode."""

    code = "invalid_check_digit"

    def __init__(self, field: Optional[str], expected: Optional[str] = None, found: Optional[str] = None) -> None:
        if expected is None:
            message = f"check digit for {field} is not a digit: {found!r}"
        else:
            message = f"check digit mismatch for {field}: expected {expected}, found {found}"
        super().__init__(message, field)
        self.expected = expected
        self.found = found


class InvalidDate(DecodeError):
    code = "invalid_date"

    def __init__(self, field: Optional[str], raw: str) -> None:
        super().__init__(f"invalid date for {field}: {raw!r}", field)
        self.raw = raw


class InvalidSex(DecodeError):
    code = "invalid_sex"

    def __init__(self, raw: str, field: str = "sex") -> None:
        super().__init__(f"invalid sex marker: {raw!r}", field)
        self.raw = raw


class InvalidName(DecodeError):
    code = "invalid_name"

    def __init__(self, raw: str, field: str = "name") -> None:
        super().__init__(f"malformed name field: {raw!r}", field)
        self.raw = raw
