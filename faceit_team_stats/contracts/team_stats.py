"""Contracts produced by the team statistics pipeline.

These models are created and consumed within a single run; the final
``TeamStatsReport`` is what the HTTP shell serialises.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field

from .common import BaseContract


class Player(BaseContract):
    """Roster member."""

    model_config = ConfigDict(frozen=True)

    id: str
    nickname: str


class MatchSummary(BaseContract):
    """Normalised record of one played map."""

    id: str
    date: str
    map: str
    result: str = Field(..., description="Team-relative token: win | loss | Unknown")
    winner: str = Field(..., description="Raw winner-side token reported by FACEIT")
    score: dict[str, Any] = Field(default_factory=dict)

    finished_at: int = Field(..., exclude=True)
    nicknames: frozenset[str] = Field(default_factory=frozenset, exclude=True)


class Series(BaseContract):
    """One competitive encounter: a best-of-N set of games or a lone game."""

    id: str
    matches: list[MatchSummary] = Field(default_factory=list)
    our_players: list[str] = Field(default_factory=list)
    total_our_players: int = 0

    @property
    def date(self) -> str:
        """Date of the most recent game in the series."""
        return self.matches[-1].date if self.matches else ""

    @property
    def finished_at(self) -> int:
        return self.matches[-1].finished_at if self.matches else 0

    def add_match(self, match: MatchSummary) -> None:
        self.matches.append(match)
        self.matches.sort(key=lambda m: m.finished_at)

    def match_ids(self) -> list[str]:
        return [m.id for m in self.matches]

    def nicknames(self) -> set[str]:
        names: set[str] = set()
        for match in self.matches:
            names |= match.nicknames
        return names


class MapStat(BaseContract):
    """Aggregated results on one map."""

    map: str
    total_matches: int = Field(0, ge=0)
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    win_rate: int = Field(0, ge=0, le=100)


class MapResult(BaseContract):
    map: str
    result: str
    score: dict[str, Any] = Field(default_factory=dict)


class RecentSeries(BaseContract):
    """Compact view of a series for the report's recent list."""

    id: str
    date: str
    maps: list[MapResult]
    series_result: Literal["Win", "Loss", "Draw"]
    our_players: list[str]
    total_our_players: int


class TeamInfo(BaseContract):
    id: str
    name: str | None = None
    avatar: str | None = None


class Period(BaseContract):
    from_: str = Field(..., alias="from")
    to: str


class Diagnostics(BaseContract):
    """Raw pipeline counters for observability."""

    all_matches_found: int = Field(0, ge=0)
    series_found: int = Field(0, ge=0)
    team_series_found: int = Field(0, ge=0)


class TeamStatsReport(BaseContract):
    """Response of a team statistics run."""

    team: TeamInfo
    period: Period
    players: list[str]
    total_series: int = Field(0, ge=0)
    total_matches: int = Field(0, ge=0)
    map_statistics: list[MapStat] = Field(default_factory=list)
    recent_series: list[RecentSeries] = Field(default_factory=list)
    diagnostics: Diagnostics
