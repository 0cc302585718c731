from __future__ import annotations

import datetime as dt

import pytest

from conftest import TD1_EXTENDED_LINES, TD1_LINES, TD3_FILLER_LINES, TD3_LINES
from mrz_decoder.errors import (
    InvalidCharacter,
    InvalidCheckDigit,
    InvalidDate,
    InvalidLength,
    InvalidName,
    InvalidSex,
    UnrecognizedLayout,
)
from mrz_decoder.pipeline.parser import detect_layout, parse, parse_lines
from mrz_decoder.pipeline.policy import ChecksumMode, ChecksumPolicy, ParseOptions
from mrz_decoder.schemas import IdentityCard, Passport, Sex


def test_parse_passport(td3_text, options) -> None:
    document = parse(td3_text, options)
    assert isinstance(document, Passport)
    assert document.kind == "passport"
    assert document.document_code == "P"
    assert document.issuing_state == "UTO"
    assert document.surname == "ERIKSSON"
    assert document.given_names == ["ANNA", "MARIA"]
    assert document.passport_number == "L898902C3"
    assert document.nationality == "UTO"
    assert document.birth_date == dt.date(1974, 8, 12)
    assert document.sex is Sex.FEMALE
    assert document.expiry_date == dt.date(2012, 4, 15)
    assert document.optional_data == "ZE184226B"
    assert document.checks.all_valid
    assert document.mrz_lines == TD3_LINES


def test_parse_passport_single_line_unspecified_sex(options) -> None:
    mrz = "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<L898902C36UTO7408122X1204159ZE184226B<<<<<10"
    document = parse(mrz, options)
    assert isinstance(document, Passport)
    assert document.passport_number == "L898902C3"
    assert document.surname == "ERIKSSON"
    assert document.given_names == ["ANNA", "MARIA"]
    assert document.nationality == "UTO"
    assert document.sex is Sex.UNSPECIFIED
    assert document.birth_date == dt.date(1974, 8, 12)
    assert document.expiry_date == dt.date(2012, 4, 15)


def test_parse_passport_with_padded_number(options) -> None:
    document = parse_lines(TD3_FILLER_LINES, options)
    assert document.issuing_state == "CAN"
    assert document.surname == "MARTIN"
    assert document.given_names == ["SARAH"]
    assert document.passport_number == "ZE000509"
    assert document.birth_date == dt.date(1985, 1, 1)
    assert document.expiry_date == dt.date(2023, 1, 14)
    assert document.optional_data is None
    assert document.checks.optional_data is True


def test_parse_identity_card(td1_text, options) -> None:
    document = parse(td1_text, options)
    assert isinstance(document, IdentityCard)
    assert document.kind == "identity_card"
    assert document.document_code == "I"
    assert document.issuing_state == "UTO"
    assert document.document_number == "CA00000AA"
    assert document.optional_data is None
    assert document.birth_date == dt.date(1974, 8, 12)
    assert document.sex is Sex.FEMALE
    assert document.expiry_date == dt.date(2012, 4, 15)
    assert document.nationality == "UTO"
    assert document.surname == "ERIKSSON"
    assert document.given_names == ["ANNA", "MARIA"]
    assert document.checks.optional_data is None
    assert document.checks.all_valid


def test_parse_identity_card_with_extended_number(options) -> None:
    document = parse_lines(TD1_EXTENDED_LINES, options)
    assert document.document_number == "D23145890734"
    assert document.optional_data is None
    assert document.checks.document_number is True
    assert document.checks.composite is True


def test_windows_newlines_and_whitespace(options) -> None:
    text = "  " + TD3_LINES[0] + "  \r\n\r\n\t" + TD3_LINES[1] + "\r\n"
    assert parse(text, options).passport_number == "L898902C3"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "ABC<<",
        "🕶️",
        "X<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<\nL898902C36UTO7408122F1204159ZE184226B<<<<<10",
        TD3_LINES[0],
        "\n".join(TD3_LINES + TD3_LINES[1:]),
        "\n".join(TD1_LINES[:2]),
    ],
)
def test_unrecognized_layout(text: str, options) -> None:
    with pytest.raises(UnrecognizedLayout):
        parse(text, options)


def test_short_line_is_invalid_length(options) -> None:
    with pytest.raises(InvalidLength) as excinfo:
        parse_lines([TD3_LINES[0], TD3_LINES[1][:-1]], options)
    assert excinfo.value.expected == 44
    assert excinfo.value.found == 43
    assert excinfo.value.line == 1


def test_long_line_is_invalid_length(options) -> None:
    with pytest.raises(InvalidLength) as excinfo:
        parse_lines([TD1_LINES[0] + "<", TD1_LINES[1], TD1_LINES[2]], options)
    assert excinfo.value.line == 0
    assert excinfo.value.found == 31


def test_lowercase_is_a_content_error(options) -> None:
    lines = [TD3_LINES[0].replace("ANNA", "anna"), TD3_LINES[1]]
    with pytest.raises(InvalidCharacter) as excinfo:
        parse_lines(lines, options)
    assert excinfo.value.position == (0, 15)


def test_lowercase_normalized_when_enabled() -> None:
    options = ParseOptions(reference_date=dt.date(2024, 1, 1), normalize_case=True)
    lines = [line.lower() for line in TD3_LINES]
    assert parse_lines(lines, options).given_names == ["ANNA", "MARIA"]


def test_invalid_birth_date(options) -> None:
    lines = [TD3_LINES[0], "L898902C36UTO7A08122F1204159ZE184226B<<<<<10"]
    with pytest.raises(InvalidDate) as excinfo:
        parse_lines(lines, options)
    assert excinfo.value.field == "birth_date"


def test_invalid_expiry_date(options) -> None:
    lines = [TD3_LINES[0], "L898902C36UTO7408122F1<0A159ZE184226B<<<<<10"]
    with pytest.raises(InvalidDate) as excinfo:
        parse_lines(lines, options)
    assert excinfo.value.field == "expiry_date"


def test_invalid_sex(options) -> None:
    lines = [TD3_LINES[0], "L898902C36UTO7408122Q1204159ZE184226B<<<<<10"]
    with pytest.raises(InvalidSex):
        parse_lines(lines, options)


def test_invalid_name(options) -> None:
    lines = [TD1_LINES[0], TD1_LINES[1], "ERIKSSONANNAMARIAERIKSSONANNAM"]
    with pytest.raises(InvalidName):
        parse_lines(lines, options)


def test_composite_mismatch_is_fatal_by_default(options) -> None:
    lines = [TD3_LINES[0], TD3_LINES[1][:-1] + "1"]
    with pytest.raises(InvalidCheckDigit) as excinfo:
        parse_lines(lines, options)
    assert excinfo.value.field == "composite_check"
    assert excinfo.value.expected == "0"
    assert excinfo.value.found == "1"


def test_composite_mismatch_is_reported_when_lenient(lenient_options) -> None:
    lines = [TD3_LINES[0], TD3_LINES[1][:-1] + "1"]
    document = parse_lines(lines, lenient_options)
    assert document.passport_number == "L898902C3"
    assert document.checks.composite is False
    assert document.checks.document_number is True
    assert not document.checks.all_valid


def test_policy_is_per_field(options) -> None:
    # Wrong birth date check digit; the composite digit no longer matches either.
    lines = [TD3_LINES[0], "L898902C36UTO7408123F1204159ZE184226B<<<<<10"]
    birth_only = ParseOptions(
        checksums=ChecksumPolicy(birth_date=ChecksumMode.LENIENT),
        reference_date=options.reference_date,
    )
    with pytest.raises(InvalidCheckDigit) as excinfo:
        parse_lines(lines, birth_only)
    assert excinfo.value.field == "composite_check"

    both = ParseOptions(
        checksums=ChecksumPolicy(birth_date=ChecksumMode.LENIENT, composite=ChecksumMode.LENIENT),
        reference_date=options.reference_date,
    )
    document = parse_lines(lines, both)
    assert document.checks.birth_date is False
    assert document.checks.composite is False
    assert document.birth_date == dt.date(1974, 8, 12)


def test_non_digit_check_is_fatal_even_when_lenient(lenient_options) -> None:
    lines = [TD3_LINES[0], "L898902C3<UTO7408122F1204159ZE184226B<<<<<10"]
    with pytest.raises(InvalidCheckDigit) as excinfo:
        parse_lines(lines, lenient_options)
    assert excinfo.value.field == "passport_number_check"


def test_detect_layout_splits_single_line() -> None:
    layout, lines = detect_layout(["".join(TD1_LINES)])
    assert layout.name == "TD1"
    assert lines == TD1_LINES


def test_extended_number_followed_by_optional_data(options) -> None:
    lines = [
        "I<UTOD23145890<7349<ABC<<<<<<<",
        "7408122F1204159UTO<<<<<<<<<<<1",
        "ERIKSSON<<ANNA<MARIA<<<<<<<<<<",
    ]
    document = parse_lines(lines, options)
    assert document.document_number == "D23145890734"
    assert document.optional_data == "ABC"
    assert document.checks.composite is True


@pytest.mark.parametrize("trim", [1, 10])
def test_short_single_line_is_invalid_length(trim: int, options) -> None:
    mrz = "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<L898902C36UTO7408122X1204159ZE184226B<<<<<10"
    with pytest.raises(InvalidLength) as excinfo:
        parse(mrz[:-trim], options)
    assert excinfo.value.expected == 88
    assert excinfo.value.found == 88 - trim
    assert excinfo.value.line == 0


def test_long_single_line_is_invalid_length(options) -> None:
    with pytest.raises(InvalidLength) as excinfo:
        parse("".join(TD1_LINES) + "<", options)
    assert excinfo.value.expected == 90
    assert excinfo.value.found == 91
