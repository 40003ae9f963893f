"""HTTP shell."""

from .team_stats_server import TeamStatsServer

__all__ = ["TeamStatsServer"]
