import logging

from fastapi import APIRouter, Depends, HTTPException

from casediary.api.deps import get_case_repository, get_view_router
from casediary.core.case_repository import CaseRepository
from casediary.core.view_router import ViewRouter, ViewState

logger = logging.getLogger("views_api")

router = APIRouter()


@router.get("/", response_model=ViewState, response_model_exclude_none=True)
async def get_view_state(view_router: ViewRouter = Depends(get_view_router)):
    return view_router.state


@router.post("/navigate/{view}", response_model=ViewState, response_model_exclude_none=True)
async def navigate(view: str, view_router: ViewRouter = Depends(get_view_router)):
    try:
        return view_router.navigate(view)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/add", response_model=ViewState, response_model_exclude_none=True)
async def add_case(view_router: ViewRouter = Depends(get_view_router)):
    return view_router.add_new()


@router.post("/edit/{case_id}", response_model=ViewState, response_model_exclude_none=True)
async def edit_case(
    case_id: str,
    repository: CaseRepository = Depends(get_case_repository),
    view_router: ViewRouter = Depends(get_view_router),
):
    case = repository.get(case_id)
    if not case:
        raise HTTPException(status_code=404, detail="Case not found")
    return view_router.edit(case)


@router.post("/cancel", response_model=ViewState, response_model_exclude_none=True)
async def cancel_form(view_router: ViewRouter = Depends(get_view_router)):
    return view_router.close_form()


@router.post("/show/{status}", response_model=ViewState, response_model_exclude_none=True)
async def show_cases(status: str, view_router: ViewRouter = Depends(get_view_router)):
    """Counter shortcut: open search filtered by status."""
    try:
        return view_router.show_cases(status)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
