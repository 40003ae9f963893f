"""Per-map aggregation of the team's games."""

from __future__ import annotations

import math
from collections.abc import Iterable

from faceit_team_stats.contracts import UNKNOWN, MapStat, Series
from faceit_team_stats.core.domain.team_policies import LOSS, WIN


def win_rate(wins: int, total: int) -> int:
    """Percentage of won games, rounded half up."""
    if total <= 0:
        return 0
    return int(math.floor(wins / total * 100 + 0.5))


def aggregate_map_statistics(series_list: Iterable[Series]) -> list[MapStat]:
    """One entry per map other than ``Unknown``, most played first.

    Ties keep the order in which maps were first encountered.
    """
    stats: dict[str, MapStat] = {}
    for series in series_list:
        for match in series.matches:
            if match.map == UNKNOWN:
                continue
            stat = stats.get(match.map)
            if stat is None:
                stat = stats[match.map] = MapStat(map=match.map)
            stat.total_matches += 1
            if match.result == WIN:
                stat.wins += 1
            elif match.result == LOSS:
                stat.losses += 1
            stat.win_rate = win_rate(stat.wins, stat.total_matches)

    # sorted() is stable, so equal totals stay in encounter order
    return sorted(stats.values(), key=lambda s: s.total_matches, reverse=True)
