"""Tests for the game and admin endpoints."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from boxscore.dependencies import get_game_service
from boxscore.main import app
from boxscore.settings import Settings, get_settings

LEAGUE_GAMES = {"NBA": ["456"], "MLB": ["123"]}


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("LEAGUE_GAMES", json.dumps(LEAGUE_GAMES))
    return Settings()


@pytest.fixture
async def client(service, settings):
    """Create test client with the fake-backed game service."""
    app.dependency_overrides[get_game_service] = lambda: service
    app.dependency_overrides[get_settings] = lambda: settings
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_missing_league_is_400(client: AsyncClient, provider):
    response = await client.get("/api/v1/games")

    assert response.status_code == 400
    error = response.json()["detail"]["error"]
    assert error["code"] == "INVALID_LEAGUE"
    assert error["message"] == "Unable to retrieve game data"
    assert error["detail"]["reason"] == "Missing league"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_both_leagues_comma_separated(client: AsyncClient):
    response = await client.get("/api/v1/games", params={"league": "NBA,mlb"})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2
    assert sorted(g["league"] for g in data) == ["MLB", "NBA"]


@pytest.mark.asyncio
async def test_single_league_filter_is_case_insensitive(client: AsyncClient, provider):
    response = await client.get("/api/v1/games", params={"league": "mlb"})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    game = data[0]
    assert game["src_id"] == "123"
    assert game["league"] == "MLB"
    assert game["status"] == "scheduled"
    assert game["updated_at"] is not None
    assert provider.calls == ["123"]


@pytest.mark.asyncio
async def test_attributes_are_passed_through(client: AsyncClient):
    response = await client.get("/api/v1/games", params={"league": "NBA"})

    assert response.status_code == 200
    assert response.json()[0]["away_period_scores"] == [24, 30, 22, 25]


@pytest.mark.asyncio
async def test_unknown_league_is_400(client: AsyncClient, provider):
    response = await client.get("/api/v1/games", params={"league": "MLS"})

    assert response.status_code == 400
    error = response.json()["detail"]["error"]
    assert error["code"] == "INVALID_LEAGUE"
    assert error["message"] == "Unable to retrieve game data"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_empty_league_is_400(client: AsyncClient):
    response = await client.get("/api/v1/games", params={"league": ""})

    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "INVALID_LEAGUE"


@pytest.mark.asyncio
async def test_fetch_failure_is_502(client: AsyncClient, provider):
    provider.failures.add("456")

    response = await client.get("/api/v1/games", params={"league": "NBA"})

    assert response.status_code == 502
    error = response.json()["detail"]["error"]
    assert error["code"] == "GAME_FETCH_FAILED"
    assert error["detail"] == {"game_id": "456"}


@pytest.mark.asyncio
async def test_get_single_game(client: AsyncClient):
    response = await client.get("/api/v1/games/456")

    assert response.status_code == 200
    assert response.json()["src_id"] == "456"
    assert response.json()["status"] == "completed"


@pytest.mark.asyncio
async def test_get_unconfigured_game_is_404(client: AsyncClient, provider):
    response = await client.get("/api/v1/games/999")

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "GAME_NOT_FOUND"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_admin_clear_games(client: AsyncClient, store):
    store.seed("123", "MLB", store.now)
    store.seed("456", "NBA", store.now)

    response = await client.delete("/api/v1/admin/games")

    assert response.status_code == 200
    assert response.json() == {"deleted": 2}
    assert store.games == {}


@pytest.mark.asyncio
async def test_service_not_initialized_is_503(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/api/v1/games", params={"league": "NBA"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["detail"]["error"]["code"] == "STORE_UNAVAILABLE"
