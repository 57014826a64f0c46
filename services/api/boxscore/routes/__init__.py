"""API routes."""

from fastapi import APIRouter

from boxscore.routes import admin, games

api_router = APIRouter()

# Game endpoints
api_router.include_router(games.router, prefix="/api/v1/games", tags=["games"])

# Admin endpoints (store management)
api_router.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])
