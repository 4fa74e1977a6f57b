from pydantic import BaseModel
from typing import Optional

from casediary.models.case import CaseModel


class DocumentAnalysis(CaseModel):
    """Structured review of an uploaded legal draft."""
    summary_of_issues: str = ""
    missing_legal_elements: str = ""
    procedural_defects: str = ""
    suggested_improvements: str = ""
    revised_full_draft: str = ""
    questions_for_clarification: str = ""
    error: Optional[str] = None


class ExtractedDocument(BaseModel):
    filename: str
    text: str
    characters: int
    used_ocr: bool = False


class ExportPayload(BaseModel):
    filename: str
    media_type: str
    content: str
