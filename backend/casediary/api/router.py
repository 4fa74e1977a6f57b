from fastapi import APIRouter
from .endpoints import cases, calendar, data, drafting, views
from datetime import datetime

router = APIRouter()

# Include all API endpoint routers
router.include_router(cases.router, prefix="/cases", tags=["Cases"])
router.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
router.include_router(data.router, prefix="/data", tags=["Data Management"])
router.include_router(drafting.router, prefix="/drafting", tags=["Drafting"])
router.include_router(views.router, prefix="/views", tags=["Views"])


# Add API-specific health check endpoint
@router.get("/health", tags=["Health"])
async def api_health_check():
    """
    API-specific health check that always responds immediately.
    """
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
