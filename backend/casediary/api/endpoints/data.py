import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from casediary.api.deps import get_case_repository
from casediary.core.case_repository import CaseRepository
from casediary.core.data_transfer import (
    EXPORT_FORMATS,
    ImportValidationError,
    export_cases,
    format_for_filename,
    import_cases,
)

# Set up logging
logger = logging.getLogger("data_api")

router = APIRouter()


@router.get("/export")
async def export_data(format: str = "json", repository: CaseRepository = Depends(get_case_repository)):
    """
    Download a backup of every case.

    The filename carries today's date.
    """
    if format not in EXPORT_FORMATS:
        raise HTTPException(status_code=422, detail=f"Unsupported export format: {format}")
    if not repository.cases:
        raise HTTPException(status_code=404, detail="There are no cases to export")

    payload = export_cases(repository.cases, format)
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
    )


@router.post("/import", response_model=Dict[str, Any])
async def import_data(
    file: UploadFile = File(...),
    confirm: bool = Form(False),
    repository: CaseRepository = Depends(get_case_repository),
):
    """
    Replace all cases with the contents of an exported file.

    The file is validated first. Without ``confirm`` only a preview is
    returned and nothing changes; with it, every existing case is overwritten.
    """
    logger.info(f"📥 IMPORT REQUEST: filename={file.filename}, confirm={confirm}")
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File content is not valid text.")

    try:
        result = import_cases(repository, text, confirm, format_for_filename(file.filename))
    except ImportValidationError as e:
        logger.warning(f"❌ IMPORT REJECTED: {str(e)}")
        raise HTTPException(status_code=400, detail=f"An error occurred during import: {str(e)}")

    if result["imported"] and not result["persisted"]:
        result["warning"] = f"Imported for this session only; saving to disk failed: {repository.last_error}"
    return result
