"""
Main entry point for the FACEIT team statistics server.
"""

import asyncio
import logging
import sys

from faceit_team_stats.api import TeamStatsServer
from faceit_team_stats.config.settings import get_settings
from faceit_team_stats.core.observability import configure_logging


def setup_logging() -> None:
    """Set up structured logging (JSON when not attached to a terminal)."""
    settings = get_settings()
    configure_logging(settings.app_log_level)


def health_check() -> None:
    """Perform basic configuration checks before serving."""
    logger = logging.getLogger(__name__)
    settings = get_settings()

    if not settings.faceit_api_key:
        # The server still starts; /api/team-stats answers 500 until the key is set.
        logger.warning("FACEIT_API_KEY is not set; team statistics requests will be rejected.")
    if settings.is_production and settings.cors_allow_origin == "*":
        logger.warning("CORS_ALLOW_ORIGIN is '*' in production.")


async def main() -> None:
    """Main async entry point."""
    logger = logging.getLogger(__name__)
    setup_logging()
    health_check()

    settings = get_settings()
    server = TeamStatsServer(settings)
    runner = None
    try:
        runner = await server.start()
        # Serve until cancelled
        await asyncio.Event().wait()
    except OSError as e:
        if getattr(e, "errno", None) in (48, 98):  # EADDRINUSE (macOS/Linux)
            logger.error("Port %d is already in use.", settings.server_port)
        else:
            logger.error("Server failed to start: %s", e)
        sys.exit(1)
    finally:
        if runner is not None:
            await runner.cleanup()
        logger.info("Server stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nServer stopped by user.")
