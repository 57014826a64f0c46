"""Read-through game service.

Flow per game id:
1. Read the stored copy (a failed read is logged and treated as a miss)
2. Fresh (updated within the window) -> serve it as-is
3. Otherwise fetch from the box score feed, upsert, serve the stored result

Upstream fetch or write-back failure fails the whole resolution with
FetchFailure, even when a stale copy exists.

Batches fan out one task per distinct id. Siblings of a failed resolution are
not cancelled: they run to completion (their writes persist) and the first
failure observed is raised once all of them have settled. Upstream refreshes
share a process-wide semaphore (MAX_CONCURRENT_FETCHES). If the caller of a
batch is cancelled the siblings still run, and their failures are logged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
import logging

from pydantic import ValidationError

from boxscore.schemas.games import GameRecord
from boxscore.services.boxscore_client import GameProvider, UpstreamError
from boxscore.services.freshness import is_fresh
from boxscore.stores.base import GameStore, StoreReadError, StoreWriteError

logger = logging.getLogger("uvicorn.error")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FetchFailure(RuntimeError):
    """A game could not be refreshed (upstream or write-back failed)."""

    def __init__(self, game_id: str, reason: str | None = None):
        self.game_id = game_id
        message = f"Failed to retrieve game {game_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class GameService:
    """Serves games from the store, refreshing stale ones from upstream."""

    def __init__(
        self,
        store: GameStore,
        provider: GameProvider,
        window: timedelta,
        *,
        max_concurrent_fetches: int = 8,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.provider = provider
        self.window = window
        self._clock = clock
        self._fetch_slots = asyncio.Semaphore(max_concurrent_fetches)
        # Tasks of batches whose caller went away; kept until they settle.
        self._abandoned: set[asyncio.Task] = set()

    async def resolve(self, game_id: str) -> GameRecord:
        """Return the best available record for one game.

        Raises:
            FetchFailure: the record was stale or missing and could not be refreshed.
        """
        try:
            game = await self.store.get(game_id)
        except StoreReadError as e:
            logger.error(f"[games.resolve({game_id})] store read failed, treating as miss: {e}")
            game = None

        if game is not None and is_fresh(game.updated_at, self._clock(), self.window):
            return game

        return await self._refresh(game_id)

    async def _refresh(self, game_id: str) -> GameRecord:
        async with self._fetch_slots:
            logger.info(f"[games.resolve({game_id})] stale or missing, fetching from upstream")
            try:
                payload = await self.provider.fetch_game(game_id)
                record = GameRecord.from_feed(game_id, payload)
                return await self.store.upsert(record)
            except (UpstreamError, StoreWriteError, ValidationError) as e:
                logger.error(f"[games.resolve({game_id})] refresh failed: {e}")
                raise FetchFailure(game_id, str(e)) from e

    async def resolve_all(self, game_ids: Iterable[str]) -> list[GameRecord]:
        """Resolve every id concurrently; order of the result is completion order.

        Raises:
            FetchFailure: the first resolution to fail (after all have settled).
        """
        unique_ids = list(dict.fromkeys(game_ids))
        if not unique_ids:
            return []

        tasks = [
            asyncio.create_task(self.resolve(game_id), name=f"resolve-game-{game_id}")
            for game_id in unique_ids
        ]

        games: list[GameRecord] = []
        first_failure: Exception | None = None
        try:
            for next_done in asyncio.as_completed(tasks):
                try:
                    games.append(await next_done)
                except Exception as e:
                    if first_failure is None:
                        first_failure = e
                    else:
                        logger.error(f"[games.resolve_all] additional failure in batch: {e}")
        except asyncio.CancelledError:
            # Caller cancelled: siblings keep running, their outcome is still collected.
            for task in tasks:
                self._abandoned.add(task)
                task.add_done_callback(self._collect_abandoned)
            raise

        if first_failure is not None:
            raise first_failure
        return games

    def _collect_abandoned(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"[games.resolve_all] failure after batch was abandoned: {exc}")

    async def clear(self) -> int:
        """Administrative: drop every stored game."""
        return await self.store.clear()
