from functools import lru_cache

from casediary.core.case_repository import CaseRepository
from casediary.core.document_processor import DocumentProcessor
from casediary.core.document_review import StreamChannel
from casediary.core.llm_service import OpenAIService
from casediary.core.view_router import ViewRouter


# Use lru_cache to create singleton instances of services
@lru_cache()
def get_case_repository() -> CaseRepository:
    """
    Returns the singleton Case Repository.
    Every view reads and writes the same authoritative collection.
    """
    return CaseRepository()


@lru_cache()
def get_view_router() -> ViewRouter:
    return ViewRouter()


@lru_cache()
def get_llm_service() -> OpenAIService:
    """
    Returns a singleton instance of the OpenAI service.
    """
    return OpenAIService()


@lru_cache()
def get_document_processor() -> DocumentProcessor:
    return DocumentProcessor()


@lru_cache()
def get_review_channel() -> StreamChannel:
    """Newest document review wins; earlier in-flight reviews are cancelled."""
    return StreamChannel("review")


@lru_cache()
def get_chat_channel() -> StreamChannel:
    return StreamChannel("chat")
