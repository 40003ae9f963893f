"""Team statistics service.

Runs the pipeline for one team:
History Collector -> Series Reconstructor -> Team Filter -> Map Aggregator
-> Report Composer. Everything built here lives for a single call.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from faceit_team_stats.adapters.faceit_api import FaceitAPIAdapter, FaceitAPIError
from faceit_team_stats.config.settings import PipelineOptions
from faceit_team_stats.contracts import Player, TeamStatsReport
from faceit_team_stats.core.domain.map_stats import aggregate_map_statistics
from faceit_team_stats.core.domain.team_policies import filter_team_series
from faceit_team_stats.core.observability import traced
from faceit_team_stats.core.ports import MatchServicePort
from faceit_team_stats.core.services.history_collector import HistoryCollector
from faceit_team_stats.core.services.report_composer import compose_report
from faceit_team_stats.core.services.series_reconstructor import SeriesReconstructor
from faceit_team_stats.core.throttle import IntervalThrottle, ThrottledMatchService

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class ServiceError(Exception):
    """The run could not start: the team itself could not be loaded."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TeamStatisticsService:
    """Production implementation of the team statistics pipeline."""

    def __init__(
        self,
        match_service: MatchServicePort,
        options: PipelineOptions | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.match_service = match_service
        self.options = options or PipelineOptions()
        self._clock = clock

    @traced(capture_args=True, log_level="INFO")
    async def compute(self, team_id: str) -> TeamStatsReport:
        now = self._clock()
        cutoff = int(now) - self.options.window_days * SECONDS_PER_DAY

        try:
            team = await self.match_service.get_team(team_id)
        except FaceitAPIError as e:
            status = e.status_code if e.status_code is not None else "network error"
            raise ServiceError(f"FACEIT API error: {status}", status_code=e.status_code) from e
        except Exception as e:
            raise ServiceError(f"FACEIT API error: {e}") from e

        players = [Player(id=m.user_id, nickname=m.nickname) for m in team.members]
        roster = {p.nickname for p in players}
        logger.info(f"Found {len(players)} players: {', '.join(sorted(roster))}")

        collector = HistoryCollector(self.match_service, page_size=self.options.page_size)
        matches = await collector.collect(players, cutoff)

        reconstructor = SeriesReconstructor(self.match_service, roster)
        all_series = await reconstructor.reconstruct(matches)

        team_series = filter_team_series(
            all_series, roster, min_players=self.options.min_roster_players
        )
        logger.info(
            f"Team {team_id}: {len(matches)} matches, {len(all_series)} series, "
            f"{len(team_series)} played by the roster"
        )

        return compose_report(
            team=team,
            players=players,
            cutoff=cutoff,
            now=now,
            all_matches_found=len(matches),
            series_found=len(all_series),
            team_series=team_series,
            map_statistics=aggregate_map_statistics(team_series),
            recent_limit=self.options.recent_series_limit,
        )


async def compute_team_statistics(
    team_id: str,
    api_key: str,
    *,
    options: PipelineOptions | None = None,
) -> TeamStatsReport:
    """Compute the map statistics report for ``team_id``.

    Raises:
        ServiceError: If the team lookup fails.
    """
    options = options or PipelineOptions()
    async with FaceitAPIAdapter(
        api_key, base_url=options.base_url, timeout_seconds=options.timeout_seconds
    ) as api:
        service = ThrottledMatchService(
            api,
            history_throttle=IntervalThrottle(options.page_interval),
            detail_throttle=IntervalThrottle(options.detail_interval),
        )
        return await TeamStatisticsService(service, options).compute(team_id)
