from pydantic import BaseModel, Field
from typing import List

from casediary.models.chat import ChatMessage


class DraftRequest(BaseModel):
    """Request payload for draft generation."""
    request: str = Field(..., min_length=1)


class DraftResponse(BaseModel):
    draft: str


class DraftExportRequest(BaseModel):
    text: str


class ReviewRequest(BaseModel):
    """Plain text of the document to review (see /drafting/extract for uploads)."""
    text: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    """The whole conversation so far, ending with the user's latest message."""
    messages: List[ChatMessage] = Field(..., min_length=1)
