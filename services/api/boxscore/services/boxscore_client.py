"""HTTP client for the upstream box score feed.

One game per request:

    GET {base_url}/{game_id}.json -> {"league": "MLB", "away_team": {...}, ...}

Hardening:
- Bounded timeout on every call
- Optional retry with exponential backoff on network errors and 429/5xx
  (UPSTREAM_MAX_RETRIES, default 0 = a single attempt)
- Payloads are validated before they reach the store
"""

import asyncio
import logging
from typing import Any, Protocol
from urllib.parse import quote, urlparse

import httpx

from boxscore.schemas.games import League
from boxscore.settings import Settings

logger = logging.getLogger("uvicorn.error")

_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}
_MAX_BACKOFF_SECONDS = 30.0


class UpstreamError(RuntimeError):
    """Upstream unreachable, or returned no/invalid data."""


class GameProvider(Protocol):
    """Upstream port: fetch one authoritative game by id."""

    async def fetch_game(self, game_id: str) -> dict[str, Any]:
        ...

    async def close(self) -> None:
        ...


def _safe_url(url: str) -> str:
    """Strip query params (may contain API keys) for safe logging."""
    parsed = urlparse(str(url))
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


def validate_game_payload(game_id: str, data: Any) -> dict[str, Any]:
    """Check a decoded feed payload is a game object for a known league."""
    if not isinstance(data, dict) or not data:
        raise UpstreamError(f"Empty or non-object payload for game {game_id}")
    league = data.get("league")
    if not isinstance(league, str) or league.strip().upper() not in League.__members__:
        raise UpstreamError(f"Unknown league {league!r} for game {game_id}")
    return data


class BoxScoreClient:
    """Client for the box score feed."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 0,
        backoff_seconds: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BoxScoreClient":
        return cls(
            base_url=settings.upstream_base_url,
            timeout=settings.upstream_timeout_seconds,
            max_retries=settings.upstream_max_retries,
            backoff_seconds=settings.upstream_retry_backoff_seconds,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def game_url(self, game_id: str) -> str:
        return f"{self.base_url}/{quote(game_id, safe='')}.json"

    async def fetch_game(self, game_id: str) -> dict[str, Any]:
        """Fetch one game from the feed.

        Args:
            game_id: Upstream source id.

        Returns:
            The decoded game payload (attributes are passed through untouched).

        Raises:
            UpstreamError: network failure, non-2xx response, or invalid payload.
        """
        response = await self._get_with_retries(self.game_url(game_id))

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Box score feed error for game {game_id}: {response.status_code}")
            raise UpstreamError(f"Feed returned {response.status_code} for game {game_id}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Feed returned invalid JSON for game {game_id}") from e

        return validate_game_payload(game_id, data)

    async def _get_with_retries(self, url: str) -> httpx.Response:
        client = await self._get_client()
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.warning(
                    f"Box score feed network error on {_safe_url(url)} "
                    f"(attempt {attempt + 1}/{attempts}): {e}"
                )
                if last_attempt:
                    raise UpstreamError(f"Box score feed unreachable: {e}") from e
            else:
                if response.status_code not in _RETRYABLE_STATUSES or last_attempt:
                    return response
                logger.warning(
                    f"Box score feed returned {response.status_code} on {_safe_url(url)} "
                    f"(attempt {attempt + 1}/{attempts})"
                )

            await asyncio.sleep(min(self.backoff_seconds * (2**attempt), _MAX_BACKOFF_SECONDS))

        raise UpstreamError(f"Box score feed gave no response after {attempts} attempts")
