from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"
    UNSPECIFIED = "X"


class CheckDigits(BaseModel):
    """Outcome of each check digit; ``False`` only appears under lenient mode."""

    model_config = ConfigDict(frozen=True)

    document_number: bool = True
    birth_date: bool = True
    expiry_date: bool = True
    optional_data: Optional[bool] = None
    composite: bool = True

    @property
    def all_valid(self) -> bool:
        return all(
            value is not False
            for value in (
                self.document_number,
                self.birth_date,
                self.expiry_date,
                self.optional_data,
                self.composite,
            )
        )


class Passport(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["passport"] = "passport"
    document_code: str
    issuing_state: str
    surname: str
    given_names: List[str] = Field(default_factory=list)
    passport_number: str
    nationality: str
    birth_date: dt.date
    sex: Sex
    expiry_date: dt.date
    optional_data: Optional[str] = None
    checks: CheckDigits = Field(default_factory=CheckDigits)
    mrz_lines: List[str] = Field(default_factory=list)


class IdentityCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["identity_card"] = "identity_card"
    document_code: str
    issuing_state: str
    document_number: str
    optional_data: Optional[str] = None
    birth_date: dt.date
    sex: Sex
    expiry_date: dt.date
    nationality: str
    optional_data_2: Optional[str] = None
    surname: str
    given_names: List[str] = Field(default_factory=list)
    checks: CheckDigits = Field(default_factory=CheckDigits)
    mrz_lines: List[str] = Field(default_factory=list)


Document = Annotated[Union[Passport, IdentityCard], Field(discriminator="kind")]


class ParseRequest(BaseModel):
    mrz: str
    checksum_mode: Optional[str] = None
    reference_date: Optional[dt.date] = None


class ParseResponse(BaseModel):
    document: Document


class ErrorItem(BaseModel):
    code: str
    message: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorItem
