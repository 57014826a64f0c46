"""Pydantic schemas for API request/response validation."""

from boxscore.schemas.common import ErrorDetail, ErrorResponse, error_body
from boxscore.schemas.games import GameRecord, League

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "error_body",
    "GameRecord",
    "League",
]
