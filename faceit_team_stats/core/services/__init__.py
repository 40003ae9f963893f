"""Pipeline services."""

from .history_collector import HistoryCollector, MatchCollection
from .report_composer import compose_report
from .series_reconstructor import SeriesBuilder, SeriesReconstructor
from .team_stats_service import ServiceError, TeamStatisticsService, compute_team_statistics

__all__ = [
    "HistoryCollector",
    "MatchCollection",
    "SeriesBuilder",
    "SeriesReconstructor",
    "ServiceError",
    "TeamStatisticsService",
    "compose_report",
    "compute_team_statistics",
]
