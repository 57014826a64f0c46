"""Game endpoints.

GET /api/v1/games?league=NBA - Box scores for every configured game of the league(s)
GET /api/v1/games/{gameId}   - Box score for one configured game

Routers are thin: league parsing and error mapping here, freshness and
refresh in the game service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from boxscore.dependencies import get_game_service
from boxscore.schemas import GameRecord, error_body
from boxscore.services.games import FetchFailure, GameService
from boxscore.services.leagues import LeagueFilterError, game_ids_for, is_known_game, parse_league_filter
from boxscore.settings import Settings, get_settings

router = APIRouter()

FAILURE_MESSAGE = "Unable to retrieve game data"


@router.get("", response_model=list[GameRecord])
async def list_games(
    service: Annotated[GameService, Depends(get_game_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    league: str | None = Query(
        default=None,
        description="League code(s), comma-separated. Required.",
        max_length=50,
        examples=["NBA", "MLB", "NBA,MLB"],
    ),
) -> list[GameRecord]:
    """Get box scores for the requested leagues.

    Stored games older than the freshness window are refreshed from the feed
    before being returned. Order of the returned games is not guaranteed.

    Raises:
        HTTPException 400: If the league filter is missing, empty or unknown.
        HTTPException 502: If any game could not be refreshed.
    """
    try:
        leagues = parse_league_filter(league)
    except LeagueFilterError as e:
        raise HTTPException(
            status_code=400,
            detail=error_body("INVALID_LEAGUE", FAILURE_MESSAGE, {"league": league, "reason": str(e)}),
        )

    game_ids = game_ids_for(leagues, settings.league_games)

    try:
        return await service.resolve_all(game_ids)
    except FetchFailure as e:
        raise _fetch_failed(e)


@router.get("/{game_id}", response_model=GameRecord)
async def get_game(
    service: Annotated[GameService, Depends(get_game_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    game_id: str = Path(
        description="Upstream game id",
        min_length=1,
        max_length=100,
        pattern=r"^[a-zA-Z0-9_-]+$",
    ),
) -> GameRecord:
    """Get the box score for a single game.

    Raises:
        HTTPException 404: If the game is not one of the configured games.
        HTTPException 502: If the game could not be refreshed.
    """
    if not is_known_game(game_id, settings.league_games):
        raise HTTPException(
            status_code=404,
            detail=error_body("GAME_NOT_FOUND", f"Game {game_id} not found", {"game_id": game_id}),
        )

    try:
        return await service.resolve(game_id)
    except FetchFailure as e:
        raise _fetch_failed(e)


def _fetch_failed(exc: FetchFailure) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail=error_body("GAME_FETCH_FAILED", FAILURE_MESSAGE, {"game_id": exc.game_id}),
    )
