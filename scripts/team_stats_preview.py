#!/usr/bin/env python3
"""Compute a team's map statistics report and print it as JSON.

Usage:
    # API key from FACEIT_API_KEY / .env
    python scripts/team_stats_preview.py --team-id 5b7c...

    # Explicit key, shorter window, save to file
    python scripts/team_stats_preview.py --team-id 5b7c... --api-key KEY --days 30 --output report.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path

from faceit_team_stats.config.settings import get_settings
from faceit_team_stats.core.observability import configure_logging
from faceit_team_stats.core.services import ServiceError, compute_team_statistics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview FACEIT team map statistics")
    parser.add_argument("--team-id", required=True, help="FACEIT team id")
    parser.add_argument("--api-key", help="FACEIT Data API key (default: FACEIT_API_KEY)")
    parser.add_argument("--days", type=int, help="History window in days (default: settings)")
    parser.add_argument("--output", type=Path, help="Write the report JSON to this file")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    api_key = args.api_key or settings.faceit_api_key
    if not api_key:
        print("❌ No API key: pass --api-key or set FACEIT_API_KEY", file=sys.stderr)
        return 2

    options = settings.pipeline_options()
    if args.days:
        options = replace(options, window_days=args.days)

    try:
        report = await compute_team_statistics(args.team_id, api_key, options=options)
    except ServiceError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    payload = json.dumps(report.to_json_dict(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        print(f"✅ Report written to {args.output}")
    else:
        print(payload)
    return 0


def main() -> int:
    args = build_parser().parse_args()
    configure_logging(args.log_level, json_output=False)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
