"""SQLAlchemy ORM models.

Models represent database tables:
- games: box scores keyed by upstream source id
"""

from boxscore.models.game import Game

__all__ = ["Game"]
