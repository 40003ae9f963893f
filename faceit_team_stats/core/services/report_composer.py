"""Assemble the team statistics report."""

from __future__ import annotations

from collections.abc import Sequence

from faceit_team_stats.contracts import (
    Diagnostics,
    MapResult,
    MapStat,
    Period,
    Player,
    RecentSeries,
    Series,
    TeamDTO,
    TeamInfo,
    TeamStatsReport,
    epoch_to_iso,
)
from faceit_team_stats.core.domain.team_policies import series_result

RECENT_SERIES_LIMIT = 10


def to_recent_series(series: Series) -> RecentSeries:
    return RecentSeries(
        id=series.id,
        date=series.date,
        maps=[MapResult(map=m.map, result=m.result, score=m.score) for m in series.matches],
        series_result=series_result(series),
        our_players=list(series.our_players),
        total_our_players=series.total_our_players,
    )


def recent_series(series_list: Sequence[Series], limit: int = RECENT_SERIES_LIMIT) -> list[RecentSeries]:
    """Most recent first; series finishing at the same time keep their order."""
    ordered = sorted(series_list, key=lambda s: s.finished_at, reverse=True)
    return [to_recent_series(s) for s in ordered[: max(0, limit)]]


def compose_report(
    *,
    team: TeamDTO,
    players: Sequence[Player],
    cutoff: int,
    now: float,
    all_matches_found: int,
    series_found: int,
    team_series: Sequence[Series],
    map_statistics: list[MapStat],
    recent_limit: int = RECENT_SERIES_LIMIT,
) -> TeamStatsReport:
    return TeamStatsReport(
        team=TeamInfo(id=team.team_id, name=team.name, avatar=team.avatar),
        period=Period(from_=epoch_to_iso(cutoff), to=epoch_to_iso(now)),
        players=[p.nickname for p in players],
        total_series=len(team_series),
        total_matches=sum(len(s.matches) for s in team_series),
        map_statistics=map_statistics,
        recent_series=recent_series(team_series, recent_limit),
        diagnostics=Diagnostics(
            all_matches_found=all_matches_found,
            series_found=series_found,
            team_series_found=len(team_series),
        ),
    )
