"""FACEIT Data API v4 adapter (aiohttp).

Provides:
- Teams (GET /teams/{team_id})
- Player history (GET /players/{player_id}/history)
- Match / series details (GET /matches/{match_id})

Implements MatchServicePort. Every non-2xx answer and every transport
failure surfaces as ``FaceitAPIError``; there are no retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from faceit_team_stats.contracts import HistoryPageDTO, MatchDetailDTO, TeamDTO
from faceit_team_stats.core.ports import MatchServicePort

DEFAULT_BASE_URL = "https://open.faceit.com/data/v4"


class FaceitAPIError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(FaceitAPIError):
    def __init__(self, retry_after: int | None = None) -> None:
        super().__init__("Rate limit exceeded", status_code=429)
        self.retry_after = retry_after


logger = logging.getLogger(__name__)


class FaceitAPIAdapter(MatchServicePort):
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 15.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._session: Any | None = session
        self._owns_session = session is None

    async def __aenter__(self) -> FaceitAPIAdapter:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_session(self) -> Any:
        if self._session is None or getattr(self._session, "closed", True):
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        try:
            if self._owns_session and self._session and not self._session.closed:
                await self._session.close()
        finally:
            if self._owns_session:
                self._session = None

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            session = await self._ensure_session()
            async with session.get(url, headers=self._headers, params=params) as resp:
                if 200 <= resp.status < 300:
                    return await resp.json()
                if resp.status == 429:
                    retry_after = resp.headers.get("Retry-After")
                    raise RateLimitError(int(retry_after) if retry_after else None)
                body = await resp.text()
                logger.warning(f"FACEIT API error {resp.status} for {path}: {body[:200]}")
                raise FaceitAPIError(f"FACEIT API error: {resp.status}", status_code=resp.status)
        except FaceitAPIError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FaceitAPIError(f"FACEIT API request failed: {e}") from e

    async def get_team(self, team_id: str) -> TeamDTO:
        data = await self._get_json(f"/teams/{quote(team_id, safe='')}")
        return self._parse(TeamDTO, data, f"team {team_id}")

    async def get_player_history(
        self, player_id: str, offset: int = 0, limit: int = 100
    ) -> HistoryPageDTO:
        data = await self._get_json(
            f"/players/{quote(player_id, safe='')}/history",
            params={"offset": offset, "limit": limit},
        )
        return self._parse(HistoryPageDTO, data, f"history of {player_id}")

    async def get_match_details(self, match_id: str) -> MatchDetailDTO:
        data = await self._get_json(f"/matches/{quote(match_id, safe='')}")
        return self._parse(MatchDetailDTO, data, f"match {match_id}")

    @staticmethod
    def _parse(model: Any, data: Any, what: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise FaceitAPIError(f"Unexpected payload for {what}: {e.error_count()} errors") from e
