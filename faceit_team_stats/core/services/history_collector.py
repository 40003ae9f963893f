"""Match history collection across a roster.

Bridges MatchServicePort history pages into one deduplicated collection of
the matches the roster played inside the time window.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from faceit_team_stats.contracts import HistoryMatchDTO, Player
from faceit_team_stats.core.ports import MatchServicePort

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class MatchCollection:
    """Matches keyed by match id, in first-seen order. Re-adding is a no-op."""

    def __init__(self) -> None:
        self._matches: dict[str, HistoryMatchDTO] = {}

    def add(self, match: HistoryMatchDTO) -> bool:
        if match.match_id in self._matches:
            return False
        self._matches[match.match_id] = match
        return True

    def get(self, match_id: str) -> HistoryMatchDTO | None:
        return self._matches.get(match_id)

    def ids(self) -> list[str]:
        return list(self._matches)

    def values(self) -> list[HistoryMatchDTO]:
        return list(self._matches.values())

    def __contains__(self, match_id: object) -> bool:
        return match_id in self._matches

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self) -> Iterator[HistoryMatchDTO]:
        return iter(list(self._matches.values()))


class HistoryCollector:
    """Page through every roster member's history down to the cutoff."""

    def __init__(self, service: MatchServicePort, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.service = service
        self.page_size = page_size

    async def collect(self, players: Iterable[Player], cutoff: int) -> MatchCollection:
        matches = MatchCollection()
        for player in players:
            added = await self.collect_player(player, cutoff, matches)
            logger.info(f"Collected {added} new matches for {player.nickname}")
        return matches

    async def collect_player(self, player: Player, cutoff: int, matches: MatchCollection) -> int:
        """Add ``player``'s matches finished at or after ``cutoff``.

        History is returned most recent first, so the first older match ends
        pagination for this player. A failed page ends it as well; whatever
        was collected so far is kept.
        """
        added = 0
        offset = 0
        while True:
            try:
                page = await self.service.get_player_history(
                    player.id, offset=offset, limit=self.page_size
                )
            except Exception as e:
                logger.warning(f"Failed to get matches for {player.nickname} at offset {offset}: {e}")
                break

            if not page.items:
                break

            reached_cutoff = False
            for item in page.items:
                if item.finished_at is None:
                    logger.debug(f"Skipping unfinished match {item.match_id}")
                    continue
                if item.finished_at < cutoff:
                    reached_cutoff = True
                    break
                if matches.add(item):
                    added += 1
            if reached_cutoff:
                break

            offset += self.page_size
            if page.end is not None and offset >= page.end:
                break
        return added
