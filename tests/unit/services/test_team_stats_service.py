"""Unit tests for TeamStatisticsService.

Runs the whole pipeline against the in-memory FakeMatchService with a fixed
clock, so every report field is deterministic.
"""

import pytest

from faceit_team_stats.config.settings import PipelineOptions
from faceit_team_stats.contracts import epoch_to_iso
from faceit_team_stats.core.services.team_stats_service import ServiceError, TeamStatisticsService

ROSTER = ["alpha", "bravo", "charlie", "delta", "echo"]
PICKUP = ("alpha", "bravo", "charlie", "p1", "p2")


@pytest.fixture
def team_service(fake_service_cls, make_history_item, make_match_detail, now, day):
    """A best-of-three, a lone map, a pick-up game and an out-of-window game."""
    start = now - 5 * day
    s1 = [
        ("m1", start, "de_dust2", "faction1"),
        ("m2", start + 3600, "de_mirage", "faction2"),
        ("m3", start + 7200, "de_dust2", "faction1"),
    ]
    m4 = ("m4", now - 2 * day, "de_dust2", "faction2")
    m5 = ("m5", now - 100 * day, "de_train", "faction1")
    m6 = ("m6", now - 1 * day, "de_inferno", "faction1")

    def item(match_id, finished_at, _map, winner, ours=tuple(ROSTER)):
        return make_history_item(match_id, finished_at, ours=ours, winner=winner)

    team_games = [item(*m4)] + [item(*g) for g in reversed(s1)] + [item(*m5)]
    pickup_games = [item(*m6, ours=PICKUP)] + team_games

    histories = {f"id-{n}": list(team_games) for n in ROSTER}
    for nickname in PICKUP[:3]:
        histories[f"id-{nickname}"] = list(pickup_games)

    details = {
        match_id: make_match_detail(match_id, parent="s1", pick=map_name, winner=winner)
        for match_id, _, map_name, winner in s1
    }
    details["s1"] = {"match_id": "s1", "match_ids": ["m1", "m2", "m3"]}
    details["m4"] = make_match_detail("m4", pick="de_dust2", winner="faction2")
    details["m6"] = make_match_detail("m6", pick="de_inferno", ours=PICKUP)

    return fake_service_cls(histories=histories, details=details)


class TestTeamStatisticsService:
    @pytest.mark.asyncio
    async def test_full_report(self, team_service, now, day):
        # Arrange
        service = TeamStatisticsService(team_service, PipelineOptions(), clock=lambda: now)

        # Act
        report = (await service.compute("team-1")).to_json_dict()

        # Assert
        assert report["team"] == {
            "id": "team-1",
            "name": "Team One",
            "avatar": "https://example.com/avatar.png",
        }
        assert report["period"] == {"from": epoch_to_iso(now - 90 * day), "to": epoch_to_iso(now)}
        assert report["players"] == ROSTER
        assert report["totalSeries"] == 2
        assert report["totalMatches"] == 4
        assert report["diagnostics"] == {
            "allMatchesFound": 5,
            "seriesFound": 3,
            "teamSeriesFound": 2,
        }
        assert report["mapStatistics"] == [
            {"map": "de_dust2", "totalMatches": 3, "wins": 2, "losses": 1, "winRate": 67},
            {"map": "de_mirage", "totalMatches": 1, "wins": 0, "losses": 1, "winRate": 0},
        ]

        recent = report["recentSeries"]
        assert [s["id"] for s in recent] == ["m4", "s1"]
        assert recent[0]["seriesResult"] == "Loss"
        assert recent[0]["date"] == epoch_to_iso(now - 2 * day)
        assert recent[1]["seriesResult"] == "Win"
        assert [m["map"] for m in recent[1]["maps"]] == ["de_dust2", "de_mirage", "de_dust2"]
        assert [m["result"] for m in recent[1]["maps"]] == ["win", "loss", "win"]
        assert recent[1]["ourPlayers"] == sorted(ROSTER)
        assert recent[1]["totalOurPlayers"] == 5

    @pytest.mark.asyncio
    async def test_team_lookup_failure_raises_service_error(self, fake_service_cls, now):
        api = fake_service_cls(team_status=404)
        service = TeamStatisticsService(api, clock=lambda: now)

        with pytest.raises(ServiceError) as exc_info:
            await service.compute("missing-team")

        assert str(exc_info.value) == "FACEIT API error: 404"
        assert exc_info.value.status_code == 404
        assert api.history_calls == []

    @pytest.mark.asyncio
    async def test_repeated_runs_are_identical(self, team_service, now):
        service = TeamStatisticsService(team_service, clock=lambda: now)

        first = (await service.compute("team-1")).to_json_dict()
        second = (await service.compute("team-1")).to_json_dict()

        assert first == second

    @pytest.mark.asyncio
    async def test_player_history_failure_does_not_fail_run(self, team_service, now):
        team_service.failing_history = {"id-alpha"}
        service = TeamStatisticsService(team_service, clock=lambda: now)

        report = await service.compute("team-1")

        assert report.total_series == 2
        assert report.diagnostics.all_matches_found == 5

    @pytest.mark.asyncio
    async def test_recent_series_capped_and_newest_first(
        self, fake_service_cls, make_history_item, make_match_detail, now
    ):
        games = [make_history_item(f"g{i:02d}", now - i * 3600) for i in range(12)]
        api = fake_service_cls(
            histories={f"id-{n}": list(games) for n in ROSTER},
            details={f"g{i:02d}": make_match_detail(f"g{i:02d}") for i in range(12)},
        )
        service = TeamStatisticsService(api, clock=lambda: now)

        report = await service.compute("team-1")

        assert report.total_series == 12
        assert [s.id for s in report.recent_series] == [f"g{i:02d}" for i in range(10)]
        dates = [s.date for s in report.recent_series]
        assert dates == sorted(dates, reverse=True)

    @pytest.mark.asyncio
    async def test_window_and_threshold_follow_options(self, team_service, now):
        options = PipelineOptions(window_days=3, min_roster_players=3)
        service = TeamStatisticsService(team_service, options, clock=lambda: now)

        report = await service.compute("team-1")

        # Only m4 (2 days ago) and the pick-up game m6 (1 day ago) are in the window
        assert report.diagnostics.all_matches_found == 2
        assert [s.id for s in report.recent_series] == ["m6", "m4"]
