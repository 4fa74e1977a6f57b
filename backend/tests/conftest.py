import os
import tempfile
from types import SimpleNamespace

import pytest

# Keep the app's log file and default data directory out of the working tree
_TEST_HOME = tempfile.mkdtemp(prefix="casediary-tests-")
os.environ["LOG_FILE"] = os.path.join(_TEST_HOME, "app.log")
os.environ["DATA_DIR"] = os.path.join(_TEST_HOME, "data")

from fastapi.testclient import TestClient

from casediary.api import deps
from casediary.core.case_repository import CaseRepository
from casediary.core.case_store import CaseStore
from casediary.core.document_review import StreamChannel
from casediary.core.llm_service import OpenAIService
from casediary.core.view_router import ViewRouter
from casediary.models.case import Case


@pytest.fixture
def make_case():
    """Factory fixture for building cases."""
    counter = {"n": 0}

    def _make_case(**kwargs) -> Case:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"case-{n}",
            "title": f"Case {n}",
            "case_number": f"{n}/2024",
            "year": 2024,
            "nature": "Civil",
            "court_name": "Civil Judge, Lahore",
            "current_stage": "",
            "diary_notes": "",
            "next_date": "",
            "status": "Pending",
        }
        fields.update(kwargs)
        return Case(**fields)

    return _make_case


@pytest.fixture
def store(tmp_path) -> CaseStore:
    return CaseStore(data_dir=tmp_path, storage_key="cases")


@pytest.fixture
def repository(store) -> CaseRepository:
    return CaseRepository(store)


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``."""

    def __init__(self, reply: str = "", chunks=None, error: Exception = None):
        self.reply = reply
        self.chunks = chunks or []
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        if kwargs.get("stream"):
            return self._stream()
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def _stream(self):
        for text in self.chunks:
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


@pytest.fixture
def make_llm_service():
    def _make(reply: str = "", chunks=None, error: Exception = None) -> OpenAIService:
        completions = FakeCompletions(reply=reply, chunks=chunks, error=error)
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        return OpenAIService(api_key="test-key", client=client)

    return _make


@pytest.fixture
def unconfigured_llm_service() -> OpenAIService:
    return OpenAIService(api_key="")


@pytest.fixture
def view_router() -> ViewRouter:
    return ViewRouter()


@pytest.fixture
def app():
    from main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, repository, view_router, unconfigured_llm_service):
    """Test client wired to a temp-directory repository and no AI key."""
    app.dependency_overrides[deps.get_case_repository] = lambda: repository
    app.dependency_overrides[deps.get_view_router] = lambda: view_router
    app.dependency_overrides[deps.get_llm_service] = lambda: unconfigured_llm_service
    review_channel = StreamChannel("review")
    chat_channel = StreamChannel("chat")
    app.dependency_overrides[deps.get_review_channel] = lambda: review_channel
    app.dependency_overrides[deps.get_chat_channel] = lambda: chat_channel

    with TestClient(app) as c:
        yield c
