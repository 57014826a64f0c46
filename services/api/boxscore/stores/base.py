"""Store port for game records.

Every backend keys records by source id and stamps `updated_at` itself as part
of the write. Callers never set the timestamp.
"""

from typing import Protocol

from boxscore.schemas.games import GameRecord


class StoreError(RuntimeError):
    """Base class for store failures."""


class StoreReadError(StoreError):
    """Lookup failed (connection dropped, bad document, ...)."""


class StoreWriteError(StoreError):
    """Upsert or clear failed."""


class GameStore(Protocol):
    """Persistent lookup / write-back of game records.

    Implementations hold one shared client or engine and must be safe to call
    from many concurrent tasks.
    """

    async def get(self, src_id: str) -> GameRecord | None:
        """Return the stored record or None. Raises StoreReadError."""
        ...

    async def upsert(self, record: GameRecord) -> GameRecord:
        """Insert or fully replace the record by src_id and return it as stored.

        Raises StoreWriteError.
        """
        ...

    async def clear(self) -> int:
        """Delete every record, returning how many were removed. Raises StoreWriteError."""
        ...

    async def close(self) -> None:
        ...
