"""Admin endpoints for store management.

These endpoints are intended for manual testing and admin operations.
In production, consider adding authentication (API key or admin token).
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from boxscore.dependencies import get_game_service
from boxscore.schemas import error_body
from boxscore.services.games import GameService
from boxscore.stores.base import StoreError

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


class ClearGamesResponse(BaseModel):
    """Response from the clear endpoint."""

    deleted: int


@router.delete("/games", response_model=ClearGamesResponse)
async def clear_games(
    service: Annotated[GameService, Depends(get_game_service)],
) -> ClearGamesResponse:
    """Delete every stored game. The next request refetches from the feed."""
    try:
        deleted = await service.clear()
    except StoreError as e:
        logger.error(f"Clearing games failed: {e}")
        raise HTTPException(
            status_code=503,
            detail=error_body("STORE_UNAVAILABLE", "Unable to clear stored games"),
        )

    logger.info(f"Admin cleared {deleted} stored games")
    return ClearGamesResponse(deleted=deleted)
