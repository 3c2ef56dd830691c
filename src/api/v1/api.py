from fastapi import APIRouter

from .enhance import router as enhance_router
from .health import router as health_router
from .prompts import router as prompts_router


# All routes are public; the service has no user accounts.
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(enhance_router)
api_router.include_router(prompts_router)
