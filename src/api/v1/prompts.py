"""Read-only access to recently enhanced prompts."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from schemas.api import ApiResponse
from schemas.enhancement import PromptHistoryEntry
from services.history import DEFAULT_LIST_LIMIT, PromptHistory, get_prompt_history


router = APIRouter(prefix="/prompts", tags=["prompts"])

HistoryDep = Annotated[PromptHistory, Depends(get_prompt_history)]


@router.get(
    "/history",
    response_model=ApiResponse[list[PromptHistoryEntry]],
    summary="List recent enhancements",
)
async def list_prompt_history(
    history: HistoryDep,
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_LIST_LIMIT,
) -> ApiResponse[list[PromptHistoryEntry]]:
    """Newest first; the buffer only holds the most recent results."""
    entries = await history.list(limit)
    return ApiResponse(
        success=True,
        data=entries,
        message=f"Retrieved {len(entries)} prompt(s)",
    )


@router.get(
    "/{prompt_id}",
    response_model=ApiResponse[PromptHistoryEntry],
    summary="Get a recorded enhancement",
)
async def get_prompt(
    prompt_id: UUID, history: HistoryDep
) -> ApiResponse[PromptHistoryEntry]:
    entry = await history.get(prompt_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found"
        )
    return ApiResponse(success=True, data=entry, message="Prompt retrieved")
