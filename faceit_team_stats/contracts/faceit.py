"""Pydantic models for FACEIT Data API v4 responses.

Upstream payloads are loosely shaped: most nested fields are optional and
differ between the history and the match-detail endpoints. Every field the
pipeline reads is declared here explicitly, with the accepted aliases, so
lookups never go through free-form dict access.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, computed_field, field_validator

UNKNOWN = "Unknown"

_MAP_TOKEN_RE = re.compile(r"de_[A-Za-z0-9_]+")


def epoch_to_iso(timestamp: int | float) -> str:
    """Render epoch seconds as an ISO-8601 UTC string with millisecond precision."""
    moment = datetime.fromtimestamp(timestamp, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# Team API Models
class TeamMemberDTO(BaseModel):
    """Member entry of a team roster."""

    user_id: str = Field(..., validation_alias=AliasChoices("user_id", "player_id"))
    nickname: str


class TeamDTO(BaseModel):
    """Team data from GET /teams/{team_id}."""

    team_id: str
    name: str | None = None
    avatar: str | None = None
    members: list[TeamMemberDTO] = Field(default_factory=list)


# Match payload pieces (shared by history items and match details)
class MatchPlayerDTO(BaseModel):
    """A player listed under one faction of a match."""

    player_id: str | None = None
    nickname: str | None = None


class FactionDTO(BaseModel):
    """One side of a match.

    History items list the side's players under ``players``; match details
    call the same list ``roster``.
    """

    players: list[MatchPlayerDTO] = Field(
        default_factory=list, validation_alias=AliasChoices("players", "roster")
    )

    @field_validator("players", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def nicknames(self) -> set[str]:
        return {p.nickname for p in self.players if p.nickname}


class ResultsDTO(BaseModel):
    """Outcome block: the winning faction token and the per-faction score."""

    winner: str | None = None
    score: dict[str, Any] = Field(default_factory=dict)

    @field_validator("score", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class MapEntityDTO(BaseModel):
    """Map entity offered in the veto."""

    name: str | None = None
    guid: str | None = None
    game_map_id: str | None = None


class MapVotingDTO(BaseModel):
    pick: list[str] = Field(default_factory=list)
    entities: list[MapEntityDTO] = Field(default_factory=list)


class VotingDTO(BaseModel):
    map: MapVotingDTO | None = None


class MatchPayload(BaseModel):
    """Fields common to history items and match/series detail records."""

    match_id: str
    finished_at: int | None = None
    teams: dict[str, FactionDTO] = Field(default_factory=dict)
    results: ResultsDTO | None = None
    voting: VotingDTO | None = None

    @field_validator("teams", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def date(self) -> str | None:
        if self.finished_at is None:
            return None
        return epoch_to_iso(self.finished_at)

    def map_name(self) -> str:
        """Resolve the played map.

        Order: vote pick, named map entity, map entity identifier (reduced to
        its ``de_`` token when it carries one), then ``"Unknown"``.
        """
        voting_map = self.voting.map if self.voting else None
        if voting_map is None:
            return UNKNOWN
        if voting_map.pick and voting_map.pick[0]:
            return voting_map.pick[0]
        entity = voting_map.entities[0] if voting_map.entities else None
        if entity is None:
            return UNKNOWN
        if entity.name:
            return entity.name
        identifier = entity.guid or entity.game_map_id
        if not identifier:
            return UNKNOWN
        token = _MAP_TOKEN_RE.search(identifier)
        return token.group(0) if token else identifier

    def winner(self) -> str:
        if self.results and self.results.winner:
            return self.results.winner
        return UNKNOWN

    def score(self) -> dict[str, Any]:
        return dict(self.results.score) if self.results else {}

    def nicknames(self) -> set[str]:
        names: set[str] = set()
        for faction in self.teams.values():
            names |= faction.nicknames()
        return names


# History API Models
class HistoryMatchDTO(MatchPayload):
    """Item of GET /players/{player_id}/history."""


class HistoryPageDTO(BaseModel):
    """One page of a player's match history."""

    items: list[HistoryMatchDTO] = Field(default_factory=list)
    start: int = 0
    end: int | None = None

    @field_validator("items", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# Match API Models
class MatchDetailDTO(MatchPayload):
    """Record of GET /matches/{match_id}.

    For a game that belongs to a best-of-N series the record carries the
    series identifier; the series' own record lists its member games.
    """

    match_id: str | None = Field(  # type: ignore[assignment]
        None, validation_alias=AliasChoices("match_id", "id")
    )
    parent_id: str | None = Field(
        None,
        validation_alias=AliasChoices("parent_match_id", "series_id", "parent_id"),
    )
    member_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("match_ids", "matches"),
    )

    @field_validator("member_ids", mode="before")
    @classmethod
    def _member_ids(cls, value: Any) -> Any:
        if value is None:
            return []
        ids: list[str] = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("match_id") or item.get("id")
            if item:
                ids.append(str(item))
        return ids
