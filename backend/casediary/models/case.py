from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

CaseStatus = Literal["Pending", "Decided"]
StatusFilter = Literal["All", "Pending", "Decided"]


class CaseNature(str, Enum):
    CIVIL = "Civil"
    CRIMINAL = "Criminal"


class CaseModel(BaseModel):
    """Base for case records: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    def to_wire(self) -> dict:
        """Dump using the persisted (camelCase) field names, leaving out unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CaseHistory(CaseModel):
    """A past hearing: diary note, the stage it was heard at and the date fixed next."""
    model_config = ConfigDict(frozen=True)

    date: str
    proceedings: str
    stage: str
    next_date: Optional[str] = ""

    @field_validator("next_date", mode="before")
    @classmethod
    def blank_next_date(cls, value):
        return "" if value is None else value


class Case(CaseModel):
    id: str
    title: str
    case_number: str
    year: int
    nature: CaseNature = CaseNature.CIVIL
    case_type: Optional[str] = None  # e.g., "Suit for Specific Performance"
    representing: Optional[str] = None  # e.g., "Plaintiff", "Defendant"
    court_name: str
    current_stage: str = ""
    diary_notes: str = ""
    next_date: Optional[str] = ""  # ISO date; null and "" both mean no hearing fixed
    history: List[CaseHistory] = Field(default_factory=list)  # most recent first
    fir_number: Optional[str] = None
    police_station: Optional[str] = None
    offence: Optional[str] = None
    status: CaseStatus = "Pending"

    @field_validator("next_date", mode="before")
    @classmethod
    def blank_next_date(cls, value):
        return "" if value is None else value


class CaseCounters(BaseModel):
    total: int = 0
    pending: int = 0
    decided: int = 0
