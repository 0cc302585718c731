from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Type, Union

from .schemas import IdentityCard, Passport

# Decode kinds understood by the parser.
CODE = "code"
COUNTRY = "country"
NAME = "name"
DOCUMENT_NUMBER = "document_number"
DATE_OF_BIRTH = "date_of_birth"
DATE_OF_EXPIRY = "date_of_expiry"
SEX = "sex"
TEXT = "text"
CHECK_DIGIT = "check_digit"


@dataclass(frozen=True)
class FieldSpec:
    key: str
    line: int
    start: int
    end: int
    field_type: str
    label: str
    # Check digits: keys whose slices feed the checksum and the policy slot governing it.
    covers: Tuple[str, ...] = ()
    policy: Optional[str] = None
    composite: bool = False
    # A filler check character is accepted when everything it covers is filler.
    filler_check: bool = False
    # Document numbers: the key of their check digit and of the field an overlong number spills into.
    check: Optional[str] = None
    extension: Optional[str] = None

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Layout:
    name: str
    kind: str
    document_codes: FrozenSet[str]
    line_count: int
    line_length: int
    fields: Tuple[FieldSpec, ...]
    record: Type[Union[Passport, IdentityCard]]

    @property
    def total_length(self) -> int:
        return self.line_count * self.line_length

    def field(self, key: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.key == key:
                return spec
        return None


TD3 = Layout(
    name="TD3",
    kind="passport",
    document_codes=frozenset({"P"}),
    line_count=2,
    line_length=44,
    record=Passport,
    fields=(
        FieldSpec("document_code", 0, 0, 2, CODE, "Document code"),
        FieldSpec("issuing_state", 0, 2, 5, COUNTRY, "Issuing state"),
        FieldSpec("name", 0, 5, 44, NAME, "Name"),
        FieldSpec(
            "passport_number",
            1,
            0,
            9,
            DOCUMENT_NUMBER,
            "Passport number",
            check="passport_number_check",
        ),
        FieldSpec(
            "passport_number_check",
            1,
            9,
            10,
            CHECK_DIGIT,
            "Passport number check digit",
            covers=("passport_number",),
            policy="document_number",
        ),
        FieldSpec("nationality", 1, 10, 13, COUNTRY, "Nationality"),
        FieldSpec("birth_date", 1, 13, 19, DATE_OF_BIRTH, "Date of birth"),
        FieldSpec(
            "birth_date_check",
            1,
            19,
            20,
            CHECK_DIGIT,
            "Date of birth check digit",
            covers=("birth_date",),
            policy="birth_date",
        ),
        FieldSpec("sex", 1, 20, 21, SEX, "Sex"),
        FieldSpec("expiry_date", 1, 21, 27, DATE_OF_EXPIRY, "Date of expiry"),
        FieldSpec(
            "expiry_date_check",
            1,
            27,
            28,
            CHECK_DIGIT,
            "Date of expiry check digit",
            covers=("expiry_date",),
            policy="expiry_date",
        ),
        FieldSpec("optional_data", 1, 28, 42, TEXT, "Personal number"),
        FieldSpec(
            "optional_data_check",
            1,
            42,
            43,
            CHECK_DIGIT,
            "Personal number check digit",
            covers=("optional_data",),
            policy="optional_data",
            filler_check=True,
        ),
        FieldSpec(
            "composite_check",
            1,
            43,
            44,
            CHECK_DIGIT,
            "Composite check digit",
            covers=(
                "passport_number",
                "passport_number_check",
                "birth_date",
                "birth_date_check",
                "expiry_date",
                "expiry_date_check",
                "optional_data",
                "optional_data_check",
            ),
            policy="composite",
            composite=True,
        ),
    ),
)


TD1 = Layout(
    name="TD1",
    kind="identity_card",
    document_codes=frozenset({"I", "C", "A"}),
    line_count=3,
    line_length=30,
    record=IdentityCard,
    fields=(
        FieldSpec("document_code", 0, 0, 2, CODE, "Document code"),
        FieldSpec("issuing_state", 0, 2, 5, COUNTRY, "Issuing state"),
        FieldSpec(
            "document_number",
            0,
            5,
            14,
            DOCUMENT_NUMBER,
            "Document number",
            check="document_number_check",
            extension="optional_data",
        ),
        FieldSpec(
            "document_number_check",
            0,
            14,
            15,
            CHECK_DIGIT,
            "Document number check digit",
            covers=("document_number",),
            policy="document_number",
        ),
        FieldSpec("optional_data", 0, 15, 30, TEXT, "Optional data (line 1)"),
        FieldSpec("birth_date", 1, 0, 6, DATE_OF_BIRTH, "Date of birth"),
        FieldSpec(
            "birth_date_check",
            1,
            6,
            7,
            CHECK_DIGIT,
            "Date of birth check digit",
            covers=("birth_date",),
            policy="birth_date",
        ),
        FieldSpec("sex", 1, 7, 8, SEX, "Sex"),
        FieldSpec("expiry_date", 1, 8, 14, DATE_OF_EXPIRY, "Date of expiry"),
        FieldSpec(
            "expiry_date_check",
            1,
            14,
            15,
            CHECK_DIGIT,
            "Date of expiry check digit",
            covers=("expiry_date",),
            policy="expiry_date",
        ),
        FieldSpec("nationality", 1, 15, 18, COUNTRY, "Nationality"),
        FieldSpec("optional_data_2", 1, 18, 29, TEXT, "Optional data (line 2)"),
        FieldSpec(
            "composite_check",
            1,
            29,
            30,
            CHECK_DIGIT,
            "Composite check digit",
            covers=(
                "document_number",
                "document_number_check",
                "optional_data",
                "birth_date",
                "birth_date_check",
                "expiry_date",
                "expiry_date_check",
                "optional_data_2",
            ),
            policy="composite",
            composite=True,
        ),
        FieldSpec("name", 2, 0, 30, NAME, "Name"),
    ),
)


LAYOUTS: List[Layout] = [TD3, TD1]
LAYOUT_REGISTRY: Dict[str, Layout] = {layout.name: layout for layout in LAYOUTS}
LAYOUT_BY_CODE: Dict[str, Layout] = {code: layout for layout in LAYOUTS for code in layout.document_codes}


def iter_layouts() -> Iterable[Layout]:
    return LAYOUTS


def get_layout(name: str) -> Optional[Layout]:
    return LAYOUT_REGISTRY.get(name.upper())


def layout_for(document_code: str) -> Optional[Layout]:
    return LAYOUT_BY_CODE.get(document_code[:1])


def layout_registry_payload() -> Dict[str, object]:
    return {
        "layouts": [
            {
                "name": layout.name,
                "kind": layout.kind,
                "document_codes": sorted(layout.document_codes),
                "line_count": layout.line_count,
                "line_length": layout.line_length,
                "fields": [
                    {
                        "key": spec.key,
                        "line": spec.line,
                        "start": spec.start,
                        "end": spec.end,
                        "type": spec.field_type,
                        "label": spec.label,
                        "covers": list(spec.covers),
                    }
                    for spec in layout.fields
                ],
            }
            for layout in LAYOUTS
        ],
    }
