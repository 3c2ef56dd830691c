from typing import Annotated

from fastapi import APIRouter, Depends

from core.config import get_settings
from schemas.api import ApiResponse
from services.enhancement import PromptEnhancementOrchestrator

from .enhance import get_enhancement_orchestrator


router = APIRouter()


@router.get("/health", response_model=ApiResponse[dict[str, str | bool]])
def health_check(
    orchestrator: Annotated[
        PromptEnhancementOrchestrator, Depends(get_enhancement_orchestrator)
    ],
) -> ApiResponse[dict[str, str | bool]]:
    """Health check endpoint for monitoring and load balancer health checks.

    Reports whether the remote model is configured, never the credential.
    """
    return ApiResponse(
        success=True,
        data={
            "status": "healthy",
            "message": f"{get_settings().APP_NAME} API is running",
            "remote_enabled": orchestrator.remote_enabled,
        },
        message="Health check successful",
    )
