"""Pytest configuration and shared fixtures.

``FakeMatchService`` is an in-memory MatchServicePort: histories are served
in pages exactly like the FACEIT history endpoint (``items`` / ``end``), and
detail lookups for unknown or failing ids raise ``FaceitAPIError``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from faceit_team_stats.adapters.faceit_api import FaceitAPIError
from faceit_team_stats.contracts import HistoryPageDTO, MatchDetailDTO, TeamDTO
from faceit_team_stats.core.ports import MatchServicePort

NOW = 1_760_000_000
DAY = 24 * 60 * 60
ROSTER = ["alpha", "bravo", "charlie", "delta", "echo"]


def _faction(nicknames: Iterable[str], key: str) -> dict[str, Any]:
    return {key: [{"player_id": f"id-{n}", "nickname": n} for n in nicknames]}


def history_item(
    match_id: str,
    finished_at: int,
    *,
    ours: Iterable[str] = ROSTER,
    theirs: Iterable[str] = ("x1", "x2", "x3", "x4", "x5"),
    winner: str | None = "faction1",
) -> dict[str, Any]:
    """History item with the roster on faction1."""
    return {
        "match_id": match_id,
        "finished_at": finished_at,
        "teams": {
            "faction1": _faction(ours, "players"),
            "faction2": _faction(theirs, "players"),
        },
        "results": {"winner": winner, "score": {"faction1": 1, "faction2": 0}} if winner else None,
    }


def match_detail(
    match_id: str,
    finished_at: int | None = None,
    *,
    parent: str | None = None,
    members: Iterable[str] | None = None,
    ours: Iterable[str] = ROSTER,
    theirs: Iterable[str] = ("x1", "x2", "x3", "x4", "x5"),
    winner: str | None = "faction1",
    pick: str | None = "de_dust2",
) -> dict[str, Any]:
    """Match detail record; detail payloads list players under ``roster``."""
    payload: dict[str, Any] = {
        "match_id": match_id,
        "finished_at": finished_at,
        "teams": {
            "faction1": _faction(ours, "roster"),
            "faction2": _faction(theirs, "roster"),
        },
        "results": {"winner": winner, "score": {"faction1": 16, "faction2": 9}} if winner else None,
        "voting": {"map": {"pick": [pick]}} if pick else None,
    }
    if parent is not None:
        payload["parent_match_id"] = parent
    if members is not None:
        payload["match_ids"] = list(members)
    return payload


class FakeMatchService(MatchServicePort):
    def __init__(
        self,
        *,
        team: dict[str, Any] | None = None,
        histories: dict[str, list[dict[str, Any]]] | None = None,
        details: dict[str, dict[str, Any]] | None = None,
        failing_history: Iterable[str] = (),
        failing_details: Iterable[str] = (),
        team_status: int | None = None,
    ) -> None:
        self.team = team or {
            "team_id": "team-1",
            "name": "Team One",
            "avatar": "https://example.com/avatar.png",
            "members": [{"user_id": f"id-{n}", "nickname": n} for n in ROSTER],
        }
        self.histories = histories or {}
        self.details = details or {}
        self.failing_history = set(failing_history)
        self.failing_details = set(failing_details)
        self.team_status = team_status
        self.history_calls: list[tuple[str, int, int]] = []
        self.detail_calls: list[str] = []

    async def get_team(self, team_id: str) -> TeamDTO:
        if self.team_status is not None:
            raise FaceitAPIError(f"FACEIT API error: {self.team_status}", self.team_status)
        return TeamDTO.model_validate(self.team)

    async def get_player_history(
        self, player_id: str, offset: int = 0, limit: int = 100
    ) -> HistoryPageDTO:
        self.history_calls.append((player_id, offset, limit))
        if player_id in self.failing_history:
            raise FaceitAPIError("FACEIT API error: 503", 503)
        items = self.histories.get(player_id, [])
        return HistoryPageDTO.model_validate(
            {"items": items[offset : offset + limit], "start": offset, "end": len(items)}
        )

    async def get_match_details(self, match_id: str) -> MatchDetailDTO:
        self.detail_calls.append(match_id)
        if match_id in self.failing_details or match_id not in self.details:
            raise FaceitAPIError("FACEIT API error: 404", 404)
        return MatchDetailDTO.model_validate(self.details[match_id])


@pytest.fixture
def fake_service_cls() -> type[FakeMatchService]:
    return FakeMatchService


@pytest.fixture
def make_history_item():
    return history_item


@pytest.fixture
def make_match_detail():
    return match_detail


@pytest.fixture
def roster() -> set[str]:
    return set(ROSTER)


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def day() -> int:
    return DAY
