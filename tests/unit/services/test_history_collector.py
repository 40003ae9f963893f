"""Unit tests for HistoryCollector."""

import pytest

from faceit_team_stats.adapters.faceit_api import FaceitAPIError
from faceit_team_stats.contracts import HistoryMatchDTO, Player
from faceit_team_stats.core.services.history_collector import HistoryCollector, MatchCollection


def _player(nickname: str) -> Player:
    return Player(id=f"id-{nickname}", nickname=nickname)


class TestMatchCollection:
    def test_first_seen_entry_wins(self, make_history_item, now):
        matches = MatchCollection()
        first = HistoryMatchDTO.model_validate(make_history_item("m1", now))
        again = HistoryMatchDTO.model_validate(make_history_item("m1", now - 10))

        assert matches.add(first) is True
        assert matches.add(again) is False
        assert len(matches) == 1
        assert matches.get("m1").finished_at == now
        assert "m1" in matches


class TestHistoryCollector:
    @pytest.mark.asyncio
    async def test_stops_at_cutoff(self, fake_service_cls, make_history_item, now, day):
        # Arrange
        service = fake_service_cls(
            histories={
                "id-alpha": [
                    make_history_item("m1", now - 1 * day),
                    make_history_item("m2", now - 10 * day),
                    make_history_item("m3", now - 100 * day),
                ]
            }
        )
        collector = HistoryCollector(service)

        # Act
        matches = await collector.collect([_player("alpha")], cutoff=now - 90 * day)

        # Assert
        assert matches.ids() == ["m1", "m2"]
        assert service.history_calls == [("id-alpha", 0, 100)]

    @pytest.mark.asyncio
    async def test_deduplicates_across_players(self, fake_service_cls, make_history_item, now):
        shared = make_history_item("shared", now - 100)
        service = fake_service_cls(
            histories={
                "id-alpha": [shared, make_history_item("a1", now - 200)],
                "id-bravo": [shared, make_history_item("b1", now - 300)],
            }
        )

        matches = await HistoryCollector(service).collect(
            [_player("alpha"), _player("bravo")], cutoff=now - 1000
        )

        assert matches.ids() == ["shared", "a1", "b1"]

    @pytest.mark.asyncio
    async def test_paginates_until_end(self, fake_service_cls, make_history_item, now):
        service = fake_service_cls(
            histories={"id-alpha": [make_history_item(f"m{i}", now - i) for i in range(5)]}
        )

        matches = await HistoryCollector(service, page_size=2).collect(
            [_player("alpha")], cutoff=now - 1000
        )

        assert len(matches) == 5
        assert [offset for _, offset, _ in service.history_calls] == [0, 2, 4]

    @pytest.mark.asyncio
    async def test_empty_history_ends_after_one_page(self, fake_service_cls, now):
        service = fake_service_cls()

        matches = await HistoryCollector(service).collect([_player("alpha")], cutoff=now - 1000)

        assert len(matches) == 0
        assert service.history_calls == [("id-alpha", 0, 100)]

    @pytest.mark.asyncio
    async def test_failed_player_is_skipped(self, fake_service_cls, make_history_item, now):
        service = fake_service_cls(
            histories={"id-alpha": [make_history_item("m1", now)]},
            failing_history={"id-bravo"},
        )

        matches = await HistoryCollector(service).collect(
            [_player("bravo"), _player("alpha")], cutoff=now - 1000
        )

        assert matches.ids() == ["m1"]

    @pytest.mark.asyncio
    async def test_failed_page_keeps_earlier_pages(self, fake_service_cls, make_history_item, now):
        class FlakyService(fake_service_cls):
            async def get_player_history(self, player_id, offset=0, limit=100):
                if offset > 0:
                    raise FaceitAPIError("FACEIT API error: 500", 500)
                return await super().get_player_history(player_id, offset=offset, limit=limit)

        service = FlakyService(
            histories={"id-alpha": [make_history_item(f"m{i}", now - i) for i in range(4)]}
        )

        matches = await HistoryCollector(service, page_size=2).collect(
            [_player("alpha")], cutoff=now - 1000
        )

        assert matches.ids() == ["m0", "m1"]

    @pytest.mark.asyncio
    async def test_items_without_finish_time_are_skipped(
        self, fake_service_cls, make_history_item, now
    ):
        ongoing = make_history_item("live", now)
        ongoing["finished_at"] = None
        service = fake_service_cls(
            histories={"id-alpha": [ongoing, make_history_item("m1", now - 10)]}
        )

        matches = await HistoryCollector(service).collect([_player("alpha")], cutoff=now - 1000)

        assert matches.ids() == ["m1"]
