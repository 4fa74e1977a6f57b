from pydantic import BaseModel
from typing import Dict, List, Optional

from casediary.models.case import Case, CaseCounters


class CaseSaveResponse(BaseModel):
    """Result of saving a case; ``persisted`` is False when only memory holds the change."""
    case: Case
    persisted: bool = True
    warning: Optional[str] = None


class RecordHearingRequest(BaseModel):
    """Stage the hearing was fixed for; defaults to the case's current stage."""
    stage_of_hearing: Optional[str] = None


class StagePredictionResponse(BaseModel):
    case_id: str
    prediction: str
    applicable: bool


class CalendarDay(BaseModel):
    date: str
    cases: List[Case] = []


class MonthOverview(BaseModel):
    year: int
    month: int
    days: Dict[str, int] = {}


class DashboardResponse(BaseModel):
    """What the calendar view shows: counters plus the selected day's listings."""
    counters: CaseCounters
    selected_day: CalendarDay
