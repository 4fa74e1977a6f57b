import json

import pytest

from casediary.api import deps
from casediary.core.llm_service import API_KEY_MISSING


def _case_payload(case_id="case-a", **overrides):
    payload = {
        "id": case_id,
        "title": "Ahmed vs Bilal",
        "caseNumber": "101/2024",
        "year": 2024,
        "nature": "Civil",
        "caseType": "Suit for Specific Performance",
        "representing": "Plaintiff",
        "courtName": "Civil Judge, Lahore",
        "currentStage": "Evidence",
        "diaryNotes": "",
        "nextDate": "2024-06-01",
        "history": [],
        "status": "Pending",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def seeded(client):
    client.post("/api/cases/", json=_case_payload("case-a"))
    client.post("/api/cases/", json=_case_payload("case-b", title="State vs Kamran", nature="Criminal",
                                                  courtName="Sessions Court", nextDate="2024-06-01"))
    client.post("/api/cases/", json=_case_payload("case-c", title="Old matter", status="Decided",
                                                  nextDate="2024-06-02"))
    return client


def test_health(client):
    assert client.get("/api/health").json()["status"] == "healthy"


def test_save_new_then_existing_case(client, repository, view_router):
    view_router.add_new()

    created = client.post("/api/cases/", json=_case_payload())
    assert created.status_code == 201
    body = created.json()
    assert body["persisted"] is True
    assert body["case"]["caseNumber"] == "101/2024"
    assert view_router.state.current_view == "calendar"

    updated = client.post("/api/cases/", json=_case_payload(title="Ahmed vs Bilal & others"))
    assert updated.status_code == 200
    assert len(repository.cases) == 1
    assert repository.get("case-a").title == "Ahmed vs Bilal & others"


def test_get_case(client):
    client.post("/api/cases/", json=_case_payload())

    assert client.get("/api/cases/case-a").json()["courtName"] == "Civil Judge, Lahore"
    assert client.get("/api/cases/missing").status_code == 404


def test_new_case_is_not_stored(client, repository):
    blank = client.post("/api/cases/new").json()

    assert blank["id"]
    assert blank["status"] == "Pending"
    assert repository.cases == []


def test_record_hearing(client, repository):
    client.post("/api/cases/", json=_case_payload(diaryNotes="Evidence of PW-1 recorded."))

    response = client.post("/api/cases/case-a/history", json={})

    assert response.status_code == 200
    case = repository.get("case-a")
    assert case.diary_notes == ""
    assert case.history[0].proceedings == "Evidence of PW-1 recorded."
    assert case.history[0].stage == "Evidence"


def test_record_hearing_without_diary_note(client):
    client.post("/api/cases/", json=_case_payload())

    assert client.post("/api/cases/case-a/history", json={}).status_code == 400


def test_predict_stage_without_api_key(client):
    client.post("/api/cases/", json=_case_payload(diaryNotes="Cross-examination of PW-2 concluded."))

    body = client.post("/api/cases/case-a/predict-stage").json()

    assert body["prediction"] == API_KEY_MISSING
    assert body["applicable"] is False


def test_predict_stage_uses_unsaved_form(client):
    client.post("/api/cases/", json=_case_payload())

    short = client.post("/api/cases/case-a/predict-stage", json=_case_payload(diaryNotes="Adjourned"))
    mismatch = client.post("/api/cases/case-a/predict-stage", json=_case_payload("case-z"))

    assert short.status_code == 400
    assert mismatch.status_code == 400


def test_calendar_index_and_stats(seeded):
    index = seeded.get("/api/calendar/").json()
    assert list(index) == ["2024-06-01"]
    assert [c["id"] for c in index["2024-06-01"]] == ["case-a", "case-b"]

    assert seeded.get("/api/calendar/stats").json() == {"total": 3, "pending": 2, "decided": 1}


def test_calendar_day_and_month(seeded):
    day = seeded.get("/api/calendar/2024-06-01").json()
    assert [c["id"] for c in day["cases"]] == ["case-a", "case-b"]
    assert seeded.get("/api/calendar/2024-06-02").json()["cases"] == []
    assert seeded.get("/api/calendar/not-a-date").status_code == 422

    month = seeded.get("/api/calendar/month/2024/6").json()
    assert month["days"]["2024-06-01"] == 2
    assert seeded.get("/api/calendar/month/2024/13").status_code == 422


def test_dashboard(seeded):
    body = seeded.get("/api/calendar/dashboard", params={"day": "2024-06-01"}).json()

    assert body["counters"]["total"] == 3
    assert len(body["selected_day"]["cases"]) == 2


def test_search(seeded):
    hits = seeded.get("/api/cases/search", params={"q": "sessions"}).json()
    assert [c["id"] for c in hits] == ["case-b"]

    decided = seeded.get("/api/cases/search", params={"status": "Decided"}).json()
    assert [c["id"] for c in decided] == ["case-c"]

    assert seeded.get("/api/cases/search", params={"status": "Archived"}).status_code == 422


def test_export(seeded):
    response = seeded.get("/api/data/export")

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="case-diary-export-')
    assert disposition.endswith('.json"')
    assert [c["id"] for c in response.json()] == ["case-a", "case-b", "case-c"]


def test_export_rejects_unknown_format_and_empty_collection(client):
    assert client.get("/api/data/export").status_code == 404
    assert client.get("/api/data/export", params={"format": "csv"}).status_code == 422


def test_import_preview_then_confirm(seeded, repository):
    exported = seeded.get("/api/data/export").text
    replacement = json.dumps([_case_payload("case-x", title="Imported")])

    preview = seeded.post(
        "/api/data/import",
        files={"file": ("backup.json", replacement, "application/json")},
        data={"confirm": "false"},
    ).json()
    assert preview["requires_confirmation"] is True
    assert len(repository.cases) == 3

    confirmed = seeded.post(
        "/api/data/import",
        files={"file": ("backup.json", replacement, "application/json")},
        data={"confirm": "true"},
    ).json()
    assert confirmed["imported"] is True
    assert confirmed["message"] == "Data imported successfully!"
    assert [c.id for c in repository.cases] == ["case-x"]
    assert "case-a" in exported


def test_import_rejects_invalid_file(seeded, repository):
    response = seeded.post(
        "/api/data/import",
        files={"file": ("backup.json", json.dumps({"cases": []}), "application/json")},
        data={"confirm": "true"},
    )

    assert response.status_code == 400
    assert response.json()["detail"].startswith("An error occurred during import:")
    assert len(repository.cases) == 3


def test_import_yaml(client, repository):
    body = "- id: case-y\n  title: From YAML\n  caseNumber: 9/2023\n  year: 2023\n  courtName: Family Court\n"

    response = client.post(
        "/api/data/import",
        files={"file": ("backup.yaml", body, "application/x-yaml")},
        data={"confirm": "true"},
    )

    assert response.status_code == 200
    assert repository.get("case-y").court_name == "Family Court"


def test_views(client, view_router):
    client.post("/api/cases/", json=_case_payload())

    assert client.post("/api/views/navigate/drafting").json()["current_view"] == "drafting"
    assert client.post("/api/views/edit/case-a").json()["selected_case"]["id"] == "case-a"
    assert client.post("/api/views/cancel").json()["current_view"] == "calendar"

    shown = client.post("/api/views/show/Decided").json()
    assert shown["current_view"] == "search"
    assert shown["search_filter"] == "Decided"

    assert client.post("/api/views/navigate/settings").status_code == 422
    assert client.post("/api/views/edit/missing").status_code == 404
    assert client.get("/api/views/").json()["current_view"] == "search"


def test_draft_without_api_key(client):
    body = client.post("/api/drafting/draft", json={"request": "Bail application under section 497"}).json()
    assert body["draft"] == API_KEY_MISSING


def test_review_without_api_key(client):
    body = client.post("/api/drafting/review", json={"text": "IN THE COURT OF ..."}).json()
    assert body["error"] == API_KEY_MISSING


def test_review_superseded_mid_stream_answers_conflict(client, app):
    channel = app.dependency_overrides[deps.get_review_channel]()

    class NewerReviewArrives:
        async def review_document_stream(self, text):
            yield '{"summaryOfIssues": '
            channel.begin()
            yield '"stale"}'

    app.dependency_overrides[deps.get_llm_service] = lambda: NewerReviewArrives()

    response = client.post("/api/drafting/review", json={"text": "IN THE COURT OF ..."})

    assert response.status_code == 409


def test_chat_without_api_key(client):
    response = client.post(
        "/api/drafting/chat",
        json={"messages": [{"role": "user", "content": "My client received a legal notice."}]},
    )
    assert response.text == API_KEY_MISSING


def test_chat_must_end_with_user_message(client):
    response = client.post("/api/drafting/chat", json={"messages": [{"role": "model", "content": "Hello"}]})
    assert response.status_code == 400


def test_extract_upload(client):
    ok = client.post("/api/drafting/extract", files={"file": ("plaint.txt", b"Plaint text", "text/plain")})
    assert ok.json()["text"] == "Plaint text"

    rejected = client.post("/api/drafting/extract", files={"file": ("sheet.xlsx", b"PK", "application/octet-stream")})
    assert rejected.status_code == 400


def test_export_draft(client):
    response = client.post("/api/drafting/export", json={"text": "IN THE COURT OF ____\nPRAYER"})

    assert response.status_code == 200
    assert response.content[:2] == b"PK"
    assert response.headers["content-disposition"].endswith('.docx"')
    assert client.post("/api/drafting/export", json={"text": "  "}).status_code == 400


def test_templates(client):
    templates = client.get("/api/drafting/templates").json()
    assert "civil_application" in templates
