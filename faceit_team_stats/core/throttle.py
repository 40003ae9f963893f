"""Fixed-interval request throttle.

Calls sharing a throttle are spaced at least ``interval`` seconds apart,
measured from the start of one call to the start of the next. The first
call never waits.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from faceit_team_stats.core.ports import MatchServicePort

if TYPE_CHECKING:
    from faceit_team_stats.contracts import HistoryPageDTO, MatchDetailDTO, TeamDTO


class IntervalThrottle:
    """Minimal spacing between successive awaited operations.

    Owned by a single run; there is never more than one caller in flight, so
    no lock is taken.
    """

    def __init__(
        self,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.interval = max(0.0, float(interval))
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    async def wait(self) -> None:
        """Block until the next operation may start, then mark it started."""
        if self._last is not None and self.interval > 0:
            remaining = self.interval - (self._clock() - self._last)
            if remaining > 0:
                await self._sleep(remaining)
        self._last = self._clock()

    def reset(self) -> None:
        self._last = None


class ThrottledMatchService(MatchServicePort):
    """Wrap a match service so history pages and detail lookups are paced.

    History pages and detail lookups each get their own cadence; the team
    lookup happens once per run and is not throttled.
    """

    def __init__(
        self,
        inner: MatchServicePort,
        *,
        history_throttle: IntervalThrottle,
        detail_throttle: IntervalThrottle,
    ) -> None:
        self.inner = inner
        self.history_throttle = history_throttle
        self.detail_throttle = detail_throttle

    async def get_team(self, team_id: str) -> TeamDTO:
        return await self.inner.get_team(team_id)

    async def get_player_history(
        self, player_id: str, offset: int = 0, limit: int = 100
    ) -> HistoryPageDTO:
        await self.history_throttle.wait()
        return await self.inner.get_player_history(player_id, offset=offset, limit=limit)

    async def get_match_details(self, match_id: str) -> MatchDetailDTO:
        await self.detail_throttle.wait()
        return await self.inner.get_match_details(match_id)
