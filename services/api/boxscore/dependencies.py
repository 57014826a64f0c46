"""Construction of the shared store, provider and game service.

The service is built once (app lifespan or script) and handed to routes via
`app.state`, so every request shares one store handle and one fetch semaphore.
"""

from datetime import timedelta
import logging

from fastapi import HTTPException, Request

from boxscore.schemas import error_body
from boxscore.services.boxscore_client import BoxScoreClient, GameProvider
from boxscore.services.games import GameService
from boxscore.settings import Settings
from boxscore.stores.base import GameStore
from boxscore.stores.postgres import create_engine, ping_db
from boxscore.stores.postgres_games import PostgresGameStore
from boxscore.stores.redis import RedisGameStore, create_redis

logger = logging.getLogger("uvicorn.error")


async def open_store(settings: Settings) -> GameStore:
    """Create the configured store and check connectivity.

    A failed check is logged but not fatal: reads then degrade to upstream
    fetches and writes surface as fetch failures.
    """
    if settings.store_backend == "redis":
        redis_store = RedisGameStore(create_redis(settings))
        try:
            await redis_store.ping()
        except Exception:
            logger.exception("Redis init failed")
        return redis_store

    engine = create_engine(settings)
    try:
        await ping_db(engine)
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")
    return PostgresGameStore(engine)


def build_game_service(settings: Settings, store: GameStore, provider: GameProvider) -> GameService:
    return GameService(
        store=store,
        provider=provider,
        window=timedelta(seconds=settings.freshness_window_seconds),
        max_concurrent_fetches=settings.max_concurrent_fetches,
    )


async def open_game_service(settings: Settings) -> GameService:
    store = await open_store(settings)
    return build_game_service(settings, store, BoxScoreClient.from_settings(settings))


async def close_game_service(service: GameService) -> None:
    await service.provider.close()
    await service.store.close()


def get_game_service(request: Request) -> GameService:
    """FastAPI dependency returning the service built at startup."""
    service: GameService | None = getattr(request.app.state, "game_service", None)
    if service is None:
        raise HTTPException(
            status_code=503,
            detail=error_body("STORE_UNAVAILABLE", "Game service is not initialized"),
        )
    return service
