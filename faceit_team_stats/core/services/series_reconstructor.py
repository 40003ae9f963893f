"""Series reconstruction.

Groups collected matches into best-of-N series using the parent/series
identifier carried by match details. Every collected match ends up in
exactly one series; a match whose membership cannot be resolved becomes a
series of its own.
"""

from __future__ import annotations

import logging

from faceit_team_stats.contracts import HistoryMatchDTO, MatchDetailDTO, MatchSummary, Series
from faceit_team_stats.contracts.faceit import UNKNOWN, MatchPayload, epoch_to_iso
from faceit_team_stats.core.domain.team_policies import team_relative_result
from faceit_team_stats.core.ports import MatchServicePort
from faceit_team_stats.core.services.history_collector import MatchCollection

logger = logging.getLogger(__name__)


class SeriesBuilder:
    """Series under construction, keyed by series id, in creation order."""

    def __init__(self) -> None:
        self._series: dict[str, Series] = {}
        self._placement: dict[str, str] = {}

    def is_placed(self, match_id: str) -> bool:
        return match_id in self._placement

    def get(self, series_id: str) -> Series | None:
        return self._series.get(series_id)

    def add(self, series: Series) -> None:
        if series.id in self._series:
            raise ValueError(f"Series {series.id} already built")
        placed = [mid for mid in series.match_ids() if mid in self._placement]
        if placed:
            raise ValueError(f"Matches already placed: {', '.join(placed)}")
        self._series[series.id] = series
        for mid in series.match_ids():
            self._placement[mid] = series.id

    def attach(self, series_id: str, match: MatchSummary) -> None:
        if match.id in self._placement:
            raise ValueError(f"Match {match.id} already placed")
        self._series[series_id].add_match(match)
        self._placement[match.id] = series_id

    def build(self) -> list[Series]:
        return list(self._series.values())

    def __len__(self) -> int:
        return len(self._series)


class SeriesReconstructor:
    def __init__(self, service: MatchServicePort, roster: set[str]) -> None:
        self.service = service
        self.roster = roster

    async def reconstruct(self, matches: MatchCollection) -> list[Series]:
        builder = SeriesBuilder()
        for raw in matches:
            if builder.is_placed(raw.match_id):
                continue
            try:
                await self._place(raw, matches, builder)
            except Exception as e:
                logger.warning(f"Series lookup failed for {raw.match_id}, keeping it standalone: {e}")
                self._add_standalone(builder, self.summarize(raw, raw))
        return builder.build()

    @staticmethod
    def _add_standalone(builder: SeriesBuilder, summary: MatchSummary) -> None:
        # A series may already be keyed by this match id when other games name it as their parent
        if builder.get(summary.id) is not None:
            builder.attach(summary.id, summary)
        else:
            builder.add(Series(id=summary.id, matches=[summary]))

    async def _place(
        self, raw: HistoryMatchDTO, matches: MatchCollection, builder: SeriesBuilder
    ) -> None:
        detail = await self.service.get_match_details(raw.match_id)
        series_id = detail.parent_id
        if not series_id or series_id == raw.match_id:
            self._add_standalone(builder, self.summarize(detail, raw))
            return

        if builder.get(series_id) is not None:
            # Series already assembled from its declared members, which missed this game
            builder.attach(series_id, self.summarize(detail, raw))
            return

        record = await self.service.get_match_details(series_id)
        member_ids = [
            mid for mid in record.member_ids if mid in matches and not builder.is_placed(mid)
        ]
        if raw.match_id not in member_ids:
            member_ids.append(raw.match_id)

        summaries: list[MatchSummary] = []
        for mid in dict.fromkeys(member_ids):
            member: MatchDetailDTO = (
                detail if mid == raw.match_id else await self.service.get_match_details(mid)
            )
            summaries.append(self.summarize(member, matches.get(mid) or raw))

        summaries.sort(key=lambda m: m.finished_at)
        builder.add(Series(id=series_id, matches=summaries))
        logger.debug(f"Series {series_id} assembled from {len(summaries)} matches")

    def summarize(self, payload: MatchPayload, history: HistoryMatchDTO) -> MatchSummary:
        """Normalise one game; the history record fills gaps in the detail."""
        finished_at = payload.finished_at or history.finished_at or 0

        map_name = payload.map_name()
        if map_name == UNKNOWN and payload is not history:
            map_name = history.map_name()

        winner = payload.winner()
        if winner == UNKNOWN:
            winner = history.winner()

        teams = payload.teams or history.teams
        return MatchSummary(
            id=history.match_id,
            date=epoch_to_iso(finished_at) if finished_at else "",
            map=map_name,
            winner=winner,
            result=team_relative_result(winner, teams, self.roster),
            score=payload.score() or history.score(),
            finished_at=finished_at,
            nicknames=frozenset(payload.nicknames() | history.nicknames()),
        )
