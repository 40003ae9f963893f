"""Team-level domain policies (pure functions).

Roster presence is a deliberately loose heuristic: a series counts as the
team's when enough roster nicknames appear anywhere in it, without checking
that they played on the same side.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Literal

from faceit_team_stats.contracts import UNKNOWN, Series
from faceit_team_stats.contracts.faceit import FactionDTO

WIN = "win"
LOSS = "loss"

MIN_ROSTER_PLAYERS = 5


def our_faction(teams: Mapping[str, FactionDTO], roster: set[str]) -> str | None:
    """Return the faction holding the most roster nicknames.

    None when no roster member is listed or two factions tie.
    """
    counts = {name: len(faction.nicknames() & roster) for name, faction in teams.items()}
    if not counts:
        return None
    best = max(counts.values())
    if best == 0:
        return None
    leaders = [name for name, count in counts.items() if count == best]
    return leaders[0] if len(leaders) == 1 else None


def team_relative_result(
    winner: str, teams: Mapping[str, FactionDTO], roster: set[str]
) -> str:
    """Translate a winner-side token into ``win`` / ``loss`` / ``Unknown``."""
    if not winner or winner == UNKNOWN:
        return UNKNOWN
    side = our_faction(teams, roster)
    if side is None:
        return UNKNOWN
    if winner == side:
        return WIN
    if winner in teams:
        return LOSS
    return UNKNOWN


def roster_presence(series: Series, roster: set[str]) -> list[str]:
    """Roster nicknames seen in any game of ``series``, sorted."""
    return sorted(series.nicknames() & roster)


def filter_team_series(
    series_list: Iterable[Series],
    roster: set[str],
    *,
    min_players: int = MIN_ROSTER_PLAYERS,
) -> list[Series]:
    """Keep the series in which at least ``min_players`` roster members appear.

    Kept series are copies carrying ``our_players`` / ``total_our_players``.
    """
    kept: list[Series] = []
    for series in series_list:
        present = roster_presence(series, roster)
        if len(present) < min_players:
            continue
        kept.append(
            series.model_copy(update={"our_players": present, "total_our_players": len(present)})
        )
    return kept


def series_result(series: Series) -> Literal["Win", "Loss", "Draw"]:
    """Majority of won versus lost games; anything else does not vote."""
    wins = sum(1 for m in series.matches if m.result == WIN)
    losses = sum(1 for m in series.matches if m.result == LOSS)
    if wins > losses:
        return "Win"
    if losses > wins:
        return "Loss"
    return "Draw"
