import logging
from datetime import date
from typing import List

from casediary.core.derivation import parse_hearing_date
from casediary.models.case import Case

logger = logging.getLogger("search")

STATUS_FILTERS = ("All", "Pending", "Decided")


def _matches(c: Case, term: str) -> bool:
    if not term:
        return True
    fields = (c.title, c.case_number, c.court_name, c.case_type, c.representing)
    return any(f and term in f.lower() for f in fields)


def filter_cases(cases: List[Case], query: str = "", status: str = "All") -> List[Case]:
    """
    Linear filter-and-sort over the collection.

    Args:
        cases: The case collection
        query: Case-insensitive substring matched against title, case number,
            court name, case type and representing side
        status: "All", "Pending" or "Decided"

    Returns:
        Matching cases, latest next hearing date first. Cases without a
        hearing date come last.
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status}")

    term = (query or "").lower()
    results = [
        c for c in cases
        if _matches(c, term) and (status == "All" or c.status == status)
    ]

    # Two stable passes: dated cases newest first, then undated ones in collection order
    dated = [c for c in results if parse_hearing_date(c.next_date)]
    undated = [c for c in results if not parse_hearing_date(c.next_date)]
    dated.sort(key=lambda c: parse_hearing_date(c.next_date) or date.min, reverse=True)

    logger.info(f"🔍 SEARCH: query={query!r}, status={status}, results={len(results)}")
    return dated + undated
