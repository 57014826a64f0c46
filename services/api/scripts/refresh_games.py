#!/usr/bin/env python3
"""Cache warm-up job for cron.

Behavior:
- Build the same game service the API uses (store + feed client)
- Optionally clear every stored game first
- Resolve every configured game id, refreshing the stale ones from the feed

Run (local / Railway):
  cd services/api
  python -m scripts.refresh_games

Optional env vars:
  REFRESH_LEAGUES="NBA,MLB"   (default: every league)
  REFRESH_CLEAR=1             (clear the store before refreshing)
  CREATE_TABLES=1             (create tables first; dev only, Postgres backend)
"""

import asyncio
import os
import sys


# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from boxscore.dependencies import close_game_service, open_game_service  # noqa: E402
from boxscore.schemas.games import League  # noqa: E402
from boxscore.services.games import FetchFailure, GameService  # noqa: E402
from boxscore.services.leagues import LeagueFilterError, game_ids_for, parse_league_filter  # noqa: E402
from boxscore.settings import get_settings  # noqa: E402
from boxscore.stores.postgres import create_tables  # noqa: E402
from boxscore.stores.postgres_games import PostgresGameStore  # noqa: E402


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


async def refresh_games(
    service: GameService,
    league_games: dict[str, list[str]],
    leagues_raw: str | None = None,
    clear: bool = False,
) -> dict:
    """Optionally clear the store, then resolve every configured game.

    leagues_raw=None selects every league.
    """
    if leagues_raw is None:
        leagues_raw = ",".join(lg.value for lg in League)
    try:
        leagues = parse_league_filter(leagues_raw)
    except LeagueFilterError as e:
        return {"ok": False, "leagues_raw": leagues_raw, "error": str(e)}

    game_ids = game_ids_for(leagues, league_games)

    cleared = await service.clear() if clear else 0

    try:
        games = await service.resolve_all(game_ids)
    except FetchFailure as e:
        return {
            "ok": False,
            "leagues": [lg.value for lg in leagues],
            "cleared": cleared,
            "requested": len(game_ids),
            "failed_game_id": e.game_id,
            "error": str(e),
        }

    return {
        "ok": True,
        "leagues": [lg.value for lg in leagues],
        "cleared": cleared,
        "requested": len(game_ids),
        "resolved": len(games),
    }


async def main() -> int:
    settings = get_settings()
    service = await open_game_service(settings)

    try:
        if _env_flag("CREATE_TABLES") and isinstance(service.store, PostgresGameStore):
            await create_tables(service.store.engine)

        result = await refresh_games(
            service,
            settings.league_games,
            leagues_raw=os.getenv("REFRESH_LEAGUES") or None,
            clear=_env_flag("REFRESH_CLEAR"),
        )
        # Final output for cron logs (single JSON-ish blob)
        print(result)
        return 0 if result["ok"] else 1
    finally:
        await close_game_service(service)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
