"""Team statistics HTTP server (aiohttp).

Endpoints:
- GET /api/team-stats?teamId=…  → Map statistics report for a team
- OPTIONS /api/team-stats       → CORS preflight
- GET /health                   → Liveness probe

Every response carries the CORS headers so the report can be fetched
straight from a browser.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from aiohttp import web

from faceit_team_stats.config.settings import Settings, get_settings
from faceit_team_stats.contracts import TeamStatsReport
from faceit_team_stats.core.observability import clear_correlation_id, set_correlation_id, traced
from faceit_team_stats.core.services.team_stats_service import (
    ServiceError,
    compute_team_statistics,
)

logger = logging.getLogger(__name__)

ComputeFn = Callable[[str, str], Awaitable[TeamStatsReport]]

ALLOWED_METHODS = "GET, OPTIONS"


class TeamStatsServer:
    """HTTP shell around the team statistics pipeline."""

    def __init__(
        self,
        settings: Settings | None = None,
        compute: ComputeFn | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            settings: Application settings (defaults to the global instance)
            compute: Coroutine computing a report from (team_id, api_key);
                defaults to the FACEIT-backed pipeline
        """
        self.settings = settings or get_settings()
        self._compute = compute or self._compute_with_settings
        self.app = web.Application(middlewares=[self._cors_middleware])
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_route("*", "/api/team-stats", self.handle_team_stats)
        self.app.router.add_get("/health", self.health_check)

    async def _compute_with_settings(self, team_id: str, api_key: str) -> TeamStatsReport:
        return await compute_team_statistics(
            team_id, api_key, options=self.settings.pipeline_options()
        )

    @web.middleware
    async def _cors_middleware(self, request: web.Request, handler: Any) -> web.StreamResponse:
        set_correlation_id(request.headers.get("X-Request-ID") or uuid.uuid4().hex)
        try:
            try:
                response = await handler(request)
            except web.HTTPException as exc:
                self._apply_cors(exc.headers)
                raise
            self._apply_cors(response.headers)
            return response
        finally:
            clear_correlation_id()

    def _apply_cors(self, headers: Any) -> None:
        headers["Access-Control-Allow-Origin"] = self.settings.cors_allow_origin
        headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        headers["Access-Control-Allow-Headers"] = "Content-Type"

    @traced(capture_args=False, log_level="INFO", warn_over_ms=30_000)
    async def handle_team_stats(self, request: web.Request) -> web.Response:
        """Compute and return the statistics report of ``teamId``."""
        if request.method == "OPTIONS":
            return web.Response(status=200)

        if request.method != "GET":
            return web.json_response({"error": "Method not allowed"}, status=405)

        team_id = request.query.get("teamId", "").strip()
        if not team_id:
            return web.json_response(
                {"error": "Team ID is required. Usage: /api/team-stats?teamId=TEAM_ID"},
                status=400,
            )

        api_key = self.settings.faceit_api_key
        if not api_key:
            logger.error("FACEIT API key not configured")
            return web.json_response({"error": "FACEIT API key not configured"}, status=500)

        logger.info(f"Fetching data for team: {team_id}")
        try:
            report = await self._compute(team_id, api_key)
        except ServiceError as e:
            logger.error(f"Team statistics failed for {team_id}: {e}")
            return self._failure(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error computing statistics for {team_id}")
            return self._failure(str(e))

        return web.json_response(report.to_json_dict())

    @staticmethod
    def _failure(details: str) -> web.Response:
        return web.json_response(
            {"error": "Failed to fetch team statistics", "details": details}, status=500
        )

    async def health_check(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({"status": "healthy"})

    async def start(self, host: str | None = None, port: int | None = None) -> web.AppRunner:
        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(
            runner, host or self.settings.server_host, port or self.settings.server_port
        )
        await site.start()
        logger.info(
            f"Team stats server listening on {host or self.settings.server_host}:"
            f"{port or self.settings.server_port}"
        )
        return runner
