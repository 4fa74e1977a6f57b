"""
Views derived from the case collection.

Everything here is a pure function of the current collection and is
recomputed in full whenever the collection changes.
"""
import calendar
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from casediary.models.case import Case, CaseCounters

logger = logging.getLogger("derivation")


def parse_hearing_date(value: str) -> Optional[date]:
    """Parse an ISO date or datetime string; None when empty or unparseable."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return None


def derive_index(cases: List[Case]) -> Dict[str, List[Case]]:
    """
    Group pending cases by their next hearing date.

    Returns:
        Mapping of ISO date to the cases listed for that day, in collection order.
    """
    index: Dict[str, List[Case]] = {}
    for c in cases:
        if c.status != "Pending" or not c.next_date:
            continue
        day = parse_hearing_date(c.next_date)
        if day is None:
            logger.warning(f"⚠️ UNPARSEABLE NEXT DATE SKIPPED: id={c.id}, next_date={c.next_date!r}")
            continue
        index.setdefault(day.isoformat(), []).append(c)
    return index


def derive_counters(cases: List[Case]) -> CaseCounters:
    return CaseCounters(
        total=len(cases),
        pending=sum(1 for c in cases if c.status == "Pending"),
        decided=sum(1 for c in cases if c.status == "Decided"),
    )


def cases_on(index: Dict[str, List[Case]], day: Union[date, str]) -> List[Case]:
    key = day.isoformat() if isinstance(day, date) else day
    return list(index.get(key, []))


def month_overview(index: Dict[str, List[Case]], year: int, month: int) -> Dict[str, int]:
    """Number of listed cases for every day of a calendar month."""
    _, days_in_month = calendar.monthrange(year, month)
    overview = {}
    for d in range(1, days_in_month + 1):
        key = date(year, month, d).isoformat()
        overview[key] = len(index.get(key, []))
    return overview
