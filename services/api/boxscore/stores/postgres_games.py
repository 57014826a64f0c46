"""Game store backed by PostgreSQL.

Upserts are a single INSERT ... ON CONFLICT (src_id) DO UPDATE statement so the
attributes and `updated_at = now()` land atomically.
"""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from boxscore.models import Game
from boxscore.schemas.games import GameRecord
from boxscore.stores.base import StoreReadError, StoreWriteError
from boxscore.stores.postgres import create_session_factory, session_scope

logger = logging.getLogger("uvicorn.error")


def build_upsert_statement(record: GameRecord) -> Insert:
    """Build the upsert for one game, returning the stored columns."""
    stmt = insert(Game).values(
        src_id=record.src_id,
        league=record.league.value,
        attributes=record.attributes,
    )
    return stmt.on_conflict_do_update(
        index_elements=[Game.src_id],
        set_={
            "league": stmt.excluded.league,
            "attributes": stmt.excluded.attributes,
            "updated_at": func.now(),
        },
    ).returning(Game.src_id, Game.league, Game.attributes, Game.updated_at)


def row_to_record(row: Any) -> GameRecord:
    """Convert a (src_id, league, attributes, updated_at) row to a GameRecord."""
    return GameRecord(
        src_id=row.src_id,
        league=row.league,
        updated_at=row.updated_at,
        **(row.attributes or {}),
    )


class PostgresGameStore:
    """GameStore over a shared async engine (one session per operation)."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = create_session_factory(engine)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def get(self, src_id: str) -> GameRecord | None:
        query = select(Game.src_id, Game.league, Game.attributes, Game.updated_at).where(
            Game.src_id == src_id
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(query)
                row = result.one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise StoreReadError(f"Failed to read game {src_id}: {e}") from e

        if row is None:
            return None
        try:
            return row_to_record(row)
        except ValidationError as e:
            raise StoreReadError(f"Stored game {src_id} is invalid: {e}") from e

    async def upsert(self, record: GameRecord) -> GameRecord:
        stmt = build_upsert_statement(record)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(stmt)
                row = result.one()
        except (SQLAlchemyError, OSError) as e:
            raise StoreWriteError(f"Failed to upsert game {record.src_id}: {e}") from e
        return row_to_record(row)

    async def clear(self) -> int:
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(delete(Game))
        except (SQLAlchemyError, OSError) as e:
            raise StoreWriteError(f"Failed to clear games: {e}") from e
        deleted = result.rowcount or 0
        logger.info(f"Cleared {deleted} games from Postgres")
        return deleted

    async def close(self) -> None:
        await self._engine.dispose()
