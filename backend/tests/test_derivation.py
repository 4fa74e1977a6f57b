from datetime import date

from casediary.core.derivation import cases_on, derive_counters, derive_index, month_overview


def test_pending_case_is_indexed_under_its_next_date(make_case):
    case = make_case(next_date="2024-06-01", status="Pending")

    index = derive_index([case])

    assert index == {"2024-06-01": [case]}


def test_deciding_a_case_removes_it_from_the_index(make_case):
    case = make_case(next_date="2024-06-01", status="Pending")
    decided = case.model_copy(update={"status": "Decided"})

    index = derive_index([decided])

    assert all(decided not in listed for listed in index.values())
    assert index == {}


def test_index_skips_decided_and_undated_cases(make_case):
    listed = make_case(next_date="2024-06-01")
    cases = [
        listed,
        make_case(next_date=""),
        make_case(next_date="2024-06-01", status="Decided"),
    ]

    index = derive_index(cases)

    assert index == {"2024-06-01": [listed]}
    for day_cases in index.values():
        for c in day_cases:
            assert c.status == "Pending" and c.next_date


def test_index_keeps_collection_order_and_normalizes_datetimes(make_case):
    a = make_case(next_date="2024-06-01T00:00:00")
    b = make_case(next_date="2024-06-01")
    c = make_case(next_date="2024-06-03")

    index = derive_index([a, b, c])

    assert index["2024-06-01"] == [a, b]
    assert index["2024-06-03"] == [c]


def test_unparseable_dates_are_skipped(make_case):
    assert derive_index([make_case(next_date="next Tuesday")]) == {}


def test_counters(make_case):
    cases = [make_case(), make_case(), make_case(status="Decided")]

    counters = derive_counters(cases)

    assert counters.total == 3
    assert counters.pending == 2
    assert counters.decided == 1
    assert counters.pending + counters.decided <= counters.total


def test_counters_on_empty_collection():
    counters = derive_counters([])
    assert (counters.total, counters.pending, counters.decided) == (0, 0, 0)


def test_cases_on_and_month_overview(make_case):
    a = make_case(next_date="2024-02-29")
    index = derive_index([a, make_case(next_date="2024-03-01")])

    assert cases_on(index, date(2024, 2, 29)) == [a]
    assert cases_on(index, "2024-02-28") == []

    overview = month_overview(index, 2024, 2)
    assert len(overview) == 29
    assert overview["2024-02-29"] == 1
    assert sum(overview.values()) == 1
