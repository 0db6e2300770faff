from fastapi import APIRouter

from routers import dashboard, polling

router = APIRouter()

# include sub-routers
router.include_router(dashboard.router)
router.include_router(polling.router)
