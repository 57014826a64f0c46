"""Shared fixtures: in-memory store and feed fakes for the game service."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from boxscore.schemas.games import GameRecord
from boxscore.services.boxscore_client import UpstreamError
from boxscore.services.games import GameService
from boxscore.stores.base import StoreReadError, StoreWriteError

NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)
WINDOW = timedelta(seconds=15)


class FakeStore:
    """Dict-backed GameStore that stamps updated_at with a fixed clock."""

    def __init__(self, now: datetime = NOW):
        self.now = now
        self.games: dict[str, GameRecord] = {}
        self.reads: list[str] = []
        self.writes: list[GameRecord] = []
        self.fail_reads = False
        self.fail_writes: set[str] = set()
        self.closed = False

    def seed(self, src_id: str, league: str, updated_at: datetime | None, **attrs: Any) -> GameRecord:
        record = GameRecord(src_id=src_id, league=league, updated_at=updated_at, **attrs)
        self.games[src_id] = record
        return record

    async def get(self, src_id: str) -> GameRecord | None:
        self.reads.append(src_id)
        await asyncio.sleep(0)
        if self.fail_reads:
            raise StoreReadError("connection refused")
        return self.games.get(src_id)

    async def upsert(self, record: GameRecord) -> GameRecord:
        await asyncio.sleep(0)
        if record.src_id in self.fail_writes:
            raise StoreWriteError(f"write failed for {record.src_id}")
        stored = record.model_copy(update={"updated_at": self.now})
        self.games[record.src_id] = stored
        self.writes.append(stored)
        return stored

    async def clear(self) -> int:
        deleted = len(self.games)
        self.games.clear()
        return deleted

    async def close(self) -> None:
        self.closed = True


class FakeProvider:
    """GameProvider returning canned payloads, with optional failures and delays."""

    def __init__(self, payloads: dict[str, dict[str, Any]] | None = None):
        self.payloads = payloads or {}
        self.failures: set[str] = set()
        self.delays: dict[str, float] = {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch_game(self, game_id: str) -> dict[str, Any]:
        self.calls.append(game_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(game_id, 0))
            if game_id in self.failures or game_id not in self.payloads:
                raise UpstreamError(f"feed unavailable for {game_id}")
            return dict(self.payloads[game_id])
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(
        {
            "123": {"league": "MLB", "status": "scheduled"},
            "456": {"league": "NBA", "status": "completed", "away_period_scores": [24, 30, 22, 25]},
        }
    )


@pytest.fixture
def service(store: FakeStore, provider: FakeProvider) -> GameService:
    return GameService(store=store, provider=provider, window=WINDOW, clock=lambda: NOW)
