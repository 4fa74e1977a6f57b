import io
import logging
from datetime import date
from typing import Optional

from docx import Document
from docx.shared import Pt

logger = logging.getLogger("document_export")

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def build_docx(text: str) -> bytes:
    """Build a Word document with one paragraph per line of the draft."""
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Times New Roman"
    style.font.size = Pt(12)

    lines = text.split("\n")
    for line in lines:
        doc.add_paragraph(line)

    buffer = io.BytesIO()
    doc.save(buffer)
    logger.info(f"✅ DRAFT DOCUMENT BUILT: paragraphs={len(lines)}")
    return buffer.getvalue()


def draft_filename(today: Optional[date] = None) -> str:
    return f"draft-{(today or date.today()).isoformat()}.docx"
