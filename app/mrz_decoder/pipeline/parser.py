"""Turn raw MRZ text into a ``Passport`` or ``IdentityCard`` record.

The parser is a generic interpreter over the layout tables in
``field_registry``: it detects the layout, slices every field, then decodes
the fields in column order. Decoding is all-or-nothing; the first failure is
raised as a ``DecodeError`` subclass.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..errors import InvalidCheckDigit, InvalidLength, UnrecognizedLayout
from ..field_registry import (
    CHECK_DIGIT,
    CODE,
    COUNTRY,
    DATE_OF_BIRTH,
    DATE_OF_EXPIRY,
    DOCUMENT_NUMBER,
    NAME,
    SEX,
    TEXT,
    FieldSpec,
    Layout,
    layout_for,
)
from ..schemas import CheckDigits, IdentityCard, Passport
from .charset import FILLER, is_filler, slice_field, validate_characters
from .checkdigit import compute, verify
from .decoders import (
    BIRTH,
    EXPIRY,
    decode_code,
    decode_country,
    decode_date,
    decode_document_number,
    decode_name,
    decode_sex,
    decode_text,
)
from .policy import ParseOptions

LOGGER = logging.getLogger(__name__)

Document = Union[Passport, IdentityCard]


@lru_cache
def default_options() -> ParseOptions:
    return ParseOptions.from_config()


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def detect_layout(lines: Sequence[str]) -> Tuple[Layout, List[str]]:
    """Pick the layout from the first character and check line count and lengths.

    A single line holding a whole MRZ back to back is split into the layout's lines.
    """
    if not lines or not lines[0]:
        raise UnrecognizedLayout("empty MRZ")
    layout = layout_for(lines[0][0])
    if layout is None:
        raise UnrecognizedLayout(f"unsupported document code {lines[0][0]!r}")
    lines = list(lines)
    if len(lines) == 1 and layout.line_count > 1 and len(lines[0]) > layout.line_length:
        single = lines[0]
        if len(single) != layout.total_length:
            raise InvalidLength(expected=layout.total_length, found=len(single), line=0)
        lines = [single[i : i + layout.line_length] for i in range(0, layout.total_length, layout.line_length)]
    if len(lines) != layout.line_count:
        raise UnrecognizedLayout(f"{layout.name} expects {layout.line_count} lines, found {len(lines)}")
    for index, line in enumerate(lines):
        if len(line) != layout.line_length:
            raise InvalidLength(expected=layout.line_length, found=len(line), line=index)
    return layout, lines


def _verify_check_digit(
    spec: FieldSpec,
    raw: Dict[str, str],
    effective: Dict[str, str],
    options: ParseOptions,
) -> bool:
    # The composite digit covers the printed slices; the others cover the decoded span.
    source = raw if spec.composite else effective
    data = "".join(source[key] for key in spec.covers)
    digit = effective[spec.key]
    if spec.filler_check and digit == FILLER and is_filler(data):
        return True
    if verify(data, digit, field_name=spec.key):
        return True
    expected = str(compute(data))
    if options.checksums.is_fatal(spec.policy):
        raise InvalidCheckDigit(spec.key, expected=expected, found=digit)
    LOGGER.warning("Check digit mismatch for %s (expected %s, found %s); keeping value", spec.key, expected, digit)
    return False


def _decode_fields(layout: Layout, lines: List[str], options: ParseOptions) -> Document:
    raw = {
        spec.key: slice_field(lines[spec.line], spec.start, spec.end, line_index=spec.line)
        for spec in layout.fields
    }
    effective = dict(raw)
    values: Dict[str, object] = {}
    checks: Dict[str, bool] = {}
    reference = options.today()

    for spec in layout.fields:
        value = effective[spec.key]
        kind = spec.field_type
        if kind == CHECK_DIGIT:
            checks[spec.policy] = _verify_check_digit(spec, raw, effective, options)
        elif kind == CODE:
            values[spec.key] = decode_code(value)
        elif kind == COUNTRY:
            values[spec.key] = decode_country(value, field=spec.key, line=spec.line, start=spec.start)
        elif kind == NAME:
            surname, given_names = decode_name(value, field=spec.key)
            values["surname"] = surname
            values["given_names"] = given_names
        elif kind == DOCUMENT_NUMBER:
            extension = effective[spec.extension] if spec.extension else None
            number = decode_document_number(value, effective[spec.check], extension, field=spec.key)
            values[spec.key] = number.value
            effective[spec.key] = number.check_input
            effective[spec.check] = number.check_char
            if spec.extension and number.remainder is not None:
                effective[spec.extension] = number.remainder
        elif kind in (DATE_OF_BIRTH, DATE_OF_EXPIRY):
            values[spec.key] = decode_date(
                value,
                field=spec.key,
                role=BIRTH if kind == DATE_OF_BIRTH else EXPIRY,
                reference=reference,
                expiry_past_window=options.expiry_past_window,
            )
        elif kind == SEX:
            values[spec.key] = decode_sex(value, field=spec.key)
        elif kind == TEXT:
            values[spec.key] = decode_text(value)
        else:
            raise ValueError(f"unknown field type {kind!r} in layout {layout.name}")

    return layout.record(**values, checks=CheckDigits(**checks), mrz_lines=lines)


def parse_lines(lines: Sequence[str], options: Optional[ParseOptions] = None) -> Document:
    options = options or default_options()
    lines = [line.strip() for line in lines if line.strip()]
    if options.normalize_case:
        lines = [line.upper() for line in lines]
    layout, lines = detect_layout(lines)
    LOGGER.debug("Detected %s layout (%s)", layout.name, layout.kind)
    for index, line in enumerate(lines):
        validate_characters(line, index)
    document = _decode_fields(layout, lines, options)
    if not document.checks.all_valid:
        LOGGER.info("Decoded %s with advisory check digit failures: %s", layout.name, document.checks)
    return document


def parse(text: str, options: Optional[ParseOptions] = None) -> Document:
    """Decode an MRZ into a ``Passport`` or ``IdentityCard``.

    ``text`` may use any newline convention; surrounding whitespace on each
    line is ignored. A full MRZ on a single line is accepted as well.
    """
    return parse_lines(split_lines(text), options)
