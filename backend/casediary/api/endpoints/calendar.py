import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from casediary.api.deps import get_case_repository
from casediary.core.case_repository import CaseRepository
from casediary.core.derivation import cases_on, derive_counters, derive_index, month_overview
from casediary.models.case import Case, CaseCounters
from casediary.schemas.case import CalendarDay, DashboardResponse, MonthOverview

logger = logging.getLogger("calendar_api")

router = APIRouter()


def _parse_day(day: str) -> date:
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date: {day}. Use YYYY-MM-DD.")


@router.get("/", response_model=Dict[str, List[Case]], response_model_exclude_none=True)
async def get_calendar_index(repository: CaseRepository = Depends(get_case_repository)):
    """Pending cases grouped by next hearing date."""
    return derive_index(repository.cases)


@router.get("/stats", response_model=CaseCounters)
async def get_stats(repository: CaseRepository = Depends(get_case_repository)):
    return derive_counters(repository.cases)


@router.get("/dashboard", response_model=DashboardResponse, response_model_exclude_none=True)
async def get_dashboard(
    day: Optional[str] = None,
    repository: CaseRepository = Depends(get_case_repository),
):
    """Counters plus the listings for one day (today by default)."""
    selected = _parse_day(day) if day else date.today()
    index = derive_index(repository.cases)
    return DashboardResponse(
        counters=derive_counters(repository.cases),
        selected_day=CalendarDay(date=selected.isoformat(), cases=cases_on(index, selected)),
    )


@router.get("/month/{year}/{month}", response_model=MonthOverview)
async def get_month(year: int, month: int, repository: CaseRepository = Depends(get_case_repository)):
    """Number of cases listed on every day of a month."""
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise HTTPException(status_code=422, detail="Invalid year or month")
    days = month_overview(derive_index(repository.cases), year, month)
    return MonthOverview(year=year, month=month, days=days)


@router.get("/{day}", response_model=CalendarDay, response_model_exclude_none=True)
async def get_day(day: str, repository: CaseRepository = Depends(get_case_repository)):
    selected = _parse_day(day)
    index = derive_index(repository.cases)
    return CalendarDay(date=selected.isoformat(), cases=cases_on(index, selected))
