"""League filter parsing and league -> game id mapping."""

from boxscore.schemas.games import League


class LeagueFilterError(ValueError):
    pass


def parse_league_filter(raw: str | None) -> list[League]:
    """Parse the `league` query parameter.

    A comma-separated, case-insensitive list of league codes is accepted.
    Missing, empty or unknown values are rejected.
    """
    codes = [part.strip().upper() for part in (raw or "").split(",") if part.strip()]
    if not codes:
        raise LeagueFilterError("Missing league")

    leagues: list[League] = []
    for code in codes:
        if code not in League.__members__:
            raise LeagueFilterError(f"Unsupported league: {code}")
        league = League(code)
        if league not in leagues:
            leagues.append(league)
    return leagues


def game_ids_for(leagues: list[League], league_games: dict[str, list[str]]) -> list[str]:
    """Collect the configured game ids for the given leagues (deduplicated, in order)."""
    ids: list[str] = []
    for league in leagues:
        for game_id in league_games.get(league.value, []):
            if game_id not in ids:
                ids.append(game_id)
    return ids


def is_known_game(game_id: str, league_games: dict[str, list[str]]) -> bool:
    return any(game_id in ids for ids in league_games.values())
