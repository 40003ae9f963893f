"""Contract models for data validation."""

from .faceit import (
    UNKNOWN,
    HistoryMatchDTO,
    HistoryPageDTO,
    MatchDetailDTO,
    TeamDTO,
    TeamMemberDTO,
    epoch_to_iso,
)
from .team_stats import (
    Diagnostics,
    MapResult,
    MapStat,
    MatchSummary,
    Period,
    Player,
    RecentSeries,
    Series,
    TeamInfo,
    TeamStatsReport,
)

__all__ = [
    "UNKNOWN",
    "TeamDTO",
    "TeamMemberDTO",
    "HistoryMatchDTO",
    "HistoryPageDTO",
    "MatchDetailDTO",
    "epoch_to_iso",
    "Player",
    "MatchSummary",
    "Series",
    "MapStat",
    "MapResult",
    "RecentSeries",
    "TeamInfo",
    "Period",
    "Diagnostics",
    "TeamStatsReport",
]
