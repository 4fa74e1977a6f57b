import pytest


def test_starts_on_calendar(view_router):
    assert view_router.state.current_view == "calendar"
    assert view_router.state.selected_case is None


def test_edit_selects_case_and_opens_form(view_router, make_case):
    case = make_case()

    state = view_router.edit(case)

    assert state.current_view == "case_form"
    assert state.selected_case == case


def test_closing_form_clears_selection_and_returns_to_calendar(view_router, make_case):
    view_router.edit(make_case())

    state = view_router.close_form()

    assert state.current_view == "calendar"
    assert state.selected_case is None


def test_add_new_opens_empty_form(view_router, make_case):
    view_router.edit(make_case())

    state = view_router.add_new()

    assert state.current_view == "case_form"
    assert state.selected_case is None


def test_counter_shortcut_opens_filtered_search(view_router):
    state = view_router.show_cases("Decided")

    assert state.current_view == "search"
    assert state.search_filter == "Decided"


def test_navigating_to_search_resets_filter(view_router):
    view_router.show_cases("Pending")

    state = view_router.navigate("search")

    assert state.search_filter == "All"


def test_navigate_clears_selection(view_router, make_case):
    view_router.edit(make_case())

    state = view_router.navigate("drafting")

    assert state.current_view == "drafting"
    assert state.selected_case is None


def test_unknown_view_or_status(view_router):
    with pytest.raises(ValueError):
        view_router.navigate("settings")
    with pytest.raises(ValueError):
        view_router.show_cases("Closed")
