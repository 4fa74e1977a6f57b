import logging
from typing import Literal, Optional

from pydantic import BaseModel

from casediary.models.case import Case, StatusFilter

logger = logging.getLogger("view_router")

View = Literal["calendar", "search", "case_form", "drafting", "data"]
VIEWS = ("calendar", "search", "case_form", "drafting", "data")


class ViewState(BaseModel):
    current_view: View = "calendar"
    selected_case: Optional[Case] = None
    search_filter: StatusFilter = "All"


class ViewRouter:
    """
    Selects the active view and the case it is working on.

    Holds no case data of its own beyond the selection; saving goes through
    the repository.
    """

    def __init__(self):
        self.state = ViewState()

    def navigate(self, view: str) -> ViewState:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        if view == "search":
            return self.show_cases("All")
        self.state = ViewState(current_view=view, search_filter=self.state.search_filter)
        logger.info(f"🧭 VIEW: {view}")
        return self.state

    def add_new(self) -> ViewState:
        self.state = ViewState(current_view="case_form", search_filter=self.state.search_filter)
        logger.info("🧭 VIEW: case_form (new case)")
        return self.state

    def edit(self, case: Case) -> ViewState:
        self.state = ViewState(current_view="case_form", selected_case=case, search_filter=self.state.search_filter)
        logger.info(f"🧭 VIEW: case_form (editing id={case.id})")
        return self.state

    def close_form(self) -> ViewState:
        """After the case form is saved or cancelled."""
        self.state = ViewState(current_view="calendar", search_filter=self.state.search_filter)
        logger.info("🧭 VIEW: calendar")
        return self.state

    def show_cases(self, status: str) -> ViewState:
        """Counter shortcut: open search pre-filtered by status."""
        if status not in ("All", "Pending", "Decided"):
            raise ValueError(f"Unknown status filter: {status}")
        self.state = ViewState(current_view="search", search_filter=status)
        logger.info(f"🧭 VIEW: search (status={status})")
        return self.state
