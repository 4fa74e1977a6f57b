import logging
from typing import Dict

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from fastapi.responses import StreamingResponse

from casediary.api.deps import get_chat_channel, get_document_processor, get_llm_service, get_review_channel
from casediary.core.document_export import DOCX_MEDIA_TYPE, build_docx, draft_filename
from casediary.core.document_processor import DocumentProcessor, UnsupportedFileTypeError
from casediary.core.document_review import StreamChannel, parse_analysis
from casediary.core.llm_service import OpenAIService
from casediary.core.system_prompt import DRAFT_TEMPLATES
from casediary.models.documents import DocumentAnalysis, ExtractedDocument
from casediary.schemas.drafting import ChatRequest, DraftExportRequest, DraftRequest, DraftResponse, ReviewRequest

logger = logging.getLogger("drafting_api")

router = APIRouter()


@router.get("/templates", response_model=Dict[str, str])
async def list_templates():
    """Fixed starting drafts for common applications."""
    return DRAFT_TEMPLATES


@router.post("/draft", response_model=DraftResponse)
async def generate_draft(request: DraftRequest, llm_service: OpenAIService = Depends(get_llm_service)):
    logger.info(f"🔄 DRAFT REQUEST: length={len(request.request)}")
    draft = await llm_service.generate_draft(request.request)
    return DraftResponse(draft=draft)


@router.post("/export")
async def export_draft(request: DraftExportRequest):
    """Download a draft as a Word document."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Nothing to export: the draft is empty")
    filename = draft_filename()
    return Response(
        content=build_docx(request.text),
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/extract", response_model=ExtractedDocument)
async def extract_document(
    file: UploadFile = File(...),
    document_processor: DocumentProcessor = Depends(get_document_processor),
):
    """
    Convert an uploaded PDF, DOCX, TXT or image to plain text for review.

    Scanned PDFs and images are read with OCR.
    """
    logger.info(f"📤 EXTRACT REQUEST: filename={file.filename}")
    try:
        document_processor.check_supported(file.filename or "")
    except UnsupportedFileTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = await file.read()
    try:
        return await document_processor.extract_upload(file.filename, data)
    except Exception as e:
        logger.error(f"❌ ERROR EXTRACTING DOCUMENT: filename={file.filename}, error={str(e)}")
        raise HTTPException(status_code=422, detail=f"Could not read the document: {str(e)}")


@router.post("/review", response_model=DocumentAnalysis, response_model_exclude_none=True)
async def review_document(
    request: ReviewRequest,
    llm_service: OpenAIService = Depends(get_llm_service),
    channel: StreamChannel = Depends(get_review_channel),
):
    """
    Review a document and return the structured analysis.

    Starting a new review cancels any review still in flight; the cancelled
    one answers 409 instead of a stale analysis.
    """
    stream_request = channel.begin()
    text = await stream_request.consume(llm_service.review_document_stream(request.text))

    if not channel.is_current(stream_request):
        raise HTTPException(status_code=409, detail="Superseded by a newer review request")
    return parse_analysis(text)


@router.post("/review/stream")
async def review_document_stream(
    request: ReviewRequest,
    llm_service: OpenAIService = Depends(get_llm_service),
    channel: StreamChannel = Depends(get_review_channel),
):
    """Raw review text as it arrives; the client extracts the JSON when the stream ends."""
    stream_request = channel.begin()
    return StreamingResponse(
        stream_request.chunks(llm_service.review_document_stream(request.text)),
        media_type="text/plain; charset=utf-8",
    )


@router.post("/chat")
async def chat_advice(
    request: ChatRequest,
    llm_service: OpenAIService = Depends(get_llm_service),
    channel: StreamChannel = Depends(get_chat_channel),
):
    """Stream the senior counsel's reply to the conversation so far."""
    if request.messages[-1].role != "user":
        raise HTTPException(status_code=400, detail="The conversation must end with a user message")

    logger.info(f"💬 CHAT REQUEST: messages={len(request.messages)}")
    stream_request = channel.begin()
    return StreamingResponse(
        stream_request.chunks(llm_service.chat_advice_stream(request.messages)),
        media_type="text/plain; charset=utf-8",
    )
