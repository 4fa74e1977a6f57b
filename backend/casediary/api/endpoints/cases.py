import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from casediary.api.deps import get_case_repository, get_llm_service, get_view_router
from casediary.core.case_form import apply_predicted_stage, record_hearing, should_predict_stage
from casediary.core.case_repository import CaseRepository
from casediary.core.llm_service import OpenAIService
from casediary.core.search import filter_cases
from casediary.core.view_router import ViewRouter
from casediary.models.case import Case
from casediary.schemas.case import CaseSaveResponse, RecordHearingRequest, StagePredictionResponse

logger = logging.getLogger("cases_api")

router = APIRouter()


def _save(repository: CaseRepository, case: Case) -> CaseSaveResponse:
    repository.upsert(case)
    saved = repository.get(case.id)
    warning = None
    if not repository.persisted:
        warning = f"Case kept for this session only; saving to disk failed: {repository.last_error}"
    return CaseSaveResponse(case=saved, persisted=repository.persisted, warning=warning)


def _get_or_404(repository: CaseRepository, case_id: str) -> Case:
    case = repository.get(case_id)
    if not case:
        logger.warning(f"⚠️ CASE NOT FOUND: id={case_id}")
        raise HTTPException(status_code=404, detail="Case not found")
    return case


@router.get("/", response_model=List[Case], response_model_exclude_none=True)
async def list_cases(repository: CaseRepository = Depends(get_case_repository)):
    """List the whole case collection in stored order."""
    return repository.list_cases()


@router.get("/search", response_model=List[Case], response_model_exclude_none=True)
async def search_cases(
    q: str = "",
    status: str = "All",
    repository: CaseRepository = Depends(get_case_repository),
):
    """
    Filter cases by free text and status.

    The text matches title, case number, court, case type or representing side.
    """
    try:
        return filter_cases(repository.cases, q, status)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/new", response_model=Case, response_model_exclude_none=True)
async def new_case(repository: CaseRepository = Depends(get_case_repository)):
    """Blank case with a fresh id. Not stored until it is saved."""
    return repository.new_case()


@router.get("/{case_id}", response_model=Case, response_model_exclude_none=True)
async def get_case(case_id: str, repository: CaseRepository = Depends(get_case_repository)):
    return _get_or_404(repository, case_id)


@router.post("/", response_model=CaseSaveResponse, response_model_exclude_none=True)
async def save_case(
    case: Case,
    response: Response,
    repository: CaseRepository = Depends(get_case_repository),
    view_router: ViewRouter = Depends(get_view_router),
):
    """
    Save a case from the case form.

    The full record replaces any case with the same id; otherwise it is
    added. The form is closed and the calendar becomes the active view.
    """
    logger.info(f"💾 SAVE CASE: id={case.id}, title={case.title!r}")
    is_new = repository.get(case.id) is None
    result = _save(repository, case)
    view_router.close_form()
    response.status_code = 201 if is_new else 200
    return result


@router.post("/{case_id}/history", response_model=CaseSaveResponse, response_model_exclude_none=True)
async def add_history(
    case_id: str,
    request: RecordHearingRequest,
    repository: CaseRepository = Depends(get_case_repository),
):
    """Record today's diary note as a history entry and save the case."""
    case = _get_or_404(repository, case_id)
    try:
        updated = record_hearing(case, stage_of_hearing=request.stage_of_hearing)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _save(repository, updated)


@router.post("/{case_id}/predict-stage", response_model=StagePredictionResponse)
async def predict_stage(
    case_id: str,
    case: Optional[Case] = Body(None),
    repository: CaseRepository = Depends(get_case_repository),
    llm_service: OpenAIService = Depends(get_llm_service),
):
    """
    Suggest the next procedural stage.

    The unsaved form contents may be posted as the body; otherwise the
    stored case is used.
    """
    if case is None:
        case = _get_or_404(repository, case_id)
    elif case.id != case_id:
        raise HTTPException(status_code=400, detail="Case id in body does not match the path")

    if not should_predict_stage(case):
        raise HTTPException(status_code=400, detail="Diary note is too short to predict the next stage")

    prediction = await llm_service.predict_stage(case)
    applicable = apply_predicted_stage(case, prediction) is not case
    return StagePredictionResponse(case_id=case_id, prediction=prediction, applicable=applicable)
