"""Game model.

One row per upstream game, keyed by the provider's source id. The feed payload
(schedule, venue, box score, status, ...) is kept as-is in `attributes`.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from boxscore.stores.postgres import Base


class Game(Base):
    """Persisted box score for a single game."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Upstream id (stable across providers, used in URLs)
    src_id: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    league: Mapped[str] = mapped_column(String(10), index=True)

    # Opaque feed payload
    attributes: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict)

    # Timestamps (updated_at drives freshness; always set by the database)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Game {self.src_id} {self.league}>"
