"""Port interfaces for hexagonal architecture.

The pipeline only talks to the match service through this port, so the
FACEIT adapter can be swapped for an in-memory fake in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from faceit_team_stats.contracts import HistoryPageDTO, MatchDetailDTO, TeamDTO

__all__ = ["MatchServicePort"]


class MatchServicePort(ABC):
    """Port for read operations against the external match service.

    Implementations raise on any failed request; the pipeline decides which
    failures are fatal.
    """

    @abstractmethod
    async def get_team(self, team_id: str) -> TeamDTO:
        """Fetch a team and its roster."""
        pass

    @abstractmethod
    async def get_player_history(
        self, player_id: str, offset: int = 0, limit: int = 100
    ) -> HistoryPageDTO:
        """Fetch one page of a player's match history, most recent first."""
        pass

    @abstractmethod
    async def get_match_details(self, match_id: str) -> MatchDetailDTO:
        """Fetch the full record of a match or of a series."""
        pass
