"""Schemas for game records (/api/v1/games)."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

# Keys owned by the record itself; everything else is a pass-through attribute.
RESERVED_KEYS = frozenset({"src_id", "league", "updated_at"})


class League(str, Enum):
    """Leagues the box score feed covers."""

    NBA = "NBA"
    MLB = "MLB"


class GameRecord(BaseModel):
    """A single game as served to clients.

    Schedule, venue, score, status and the rest of the feed payload are kept
    as extra fields and passed through untouched. `updated_at` is stamped by
    the store on every write and is None for a record that was never persisted.
    """

    model_config = ConfigDict(extra="allow")

    src_id: str
    league: League
    updated_at: datetime | None = None

    @field_validator("league", mode="before")
    @classmethod
    def _normalize_league(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def attributes(self) -> dict[str, Any]:
        """Pass-through game attributes (everything but src_id/league/updated_at)."""
        return dict(self.model_extra or {})

    @classmethod
    def from_feed(cls, src_id: str, payload: dict[str, Any]) -> "GameRecord":
        """Merge an upstream payload with the source id it was fetched by."""
        data = {k: v for k, v in payload.items() if k not in RESERVED_KEYS}
        return cls(src_id=src_id, league=payload.get("league"), **data)
