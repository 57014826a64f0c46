"""Data stores for persistence.

Stores handle:
- PostgreSQL: engine, sessions, game upserts
- Redis: alternate game store (one JSON document per game)

No freshness/refresh logic in stores - that belongs in services.
"""

from boxscore.stores.base import GameStore, StoreError, StoreReadError, StoreWriteError

__all__ = ["GameStore", "StoreError", "StoreReadError", "StoreWriteError"]
