"""
Chart Ranker Tests

Every chart: fetch scoped games, fetch metrics concurrently, score, sort by
score desc / game_id asc, slice to limit, rank 1..N.

Scenarios:
----------
5. Top Trending: plays7d=100, prev=50 -> 1.0; prev=0, plays7d=40 -> 40
6. TRENDING_IN_GENRE without a genre id -> InvalidChartRequest, no source call

Run:
----
    pytest tests/test_charts.py -v
"""

import math

import pytest

from game_ranking import ChartRanker, InvalidChartRequest, SourceUnavailableError
from game_ranking.models import AgeBand, ChartType, GameMetrics, Platform

from fakes import NOW, FakeChartSource, build_game, days_ago

BAND = AgeBand.AGE_9_TO_12
PLATFORM = Platform.MOBILE


def _ranker(source, **kwargs):
    return ChartRanker(source, clock=lambda: NOW, **kwargs)


def _rows(entries):
    return [(e.game_id, e.rank) for e in entries]


class TestChartFormulas:
    @pytest.mark.asyncio
    async def test_top_trending(self):
        source = FakeChartSource(
            games=[build_game("grow"), build_game("new")],
            metrics={
                "grow": GameMetrics(plays_last_7_days=100, plays_prev_7_days=50),
                "new": GameMetrics(plays_last_7_days=40, plays_prev_7_days=0),
            },
        )
        entries = await _ranker(source).generate_top_trending(BAND, PLATFORM)
        assert [(e.game_id, e.score, e.rank) for e in entries] == [
            ("new", 40.0, 1),
            ("grow", 1.0, 2),
        ]

    @pytest.mark.asyncio
    async def test_up_and_coming_window(self):
        source = FakeChartSource(
            games=[
                build_game("fresh", release_date=days_ago(10)),
                build_game("edge", release_date=days_ago(30)),
                build_game("old", release_date=days_ago(31)),
            ],
            metrics={
                "fresh": GameMetrics(plays_last_30_days=0),
                "edge": GameMetrics(plays_last_30_days=100),
                "old": GameMetrics(plays_last_30_days=10**6),
            },
        )
        entries = await _ranker(source).generate_up_and_coming(BAND, PLATFORM)
        scores = {e.game_id: e.score for e in entries}
        assert set(scores) == {"fresh", "edge"}
        assert scores["fresh"] == pytest.approx(0.4 * (1 - 10 / 30))
        assert scores["edge"] == pytest.approx(0.6 * math.log(101))
        # Out-of-window games are never fetched
        assert "old" not in source.metrics_calls

    @pytest.mark.asyncio
    async def test_top_playing_now_and_earning(self):
        source = FakeChartSource(
            games=[build_game("a"), build_game("b")],
            metrics={
                "a": GameMetrics(current_sessions=5, total_revenue=900.0),
                "b": GameMetrics(current_sessions=50, total_revenue=10.0),
            },
        )
        ranker = _ranker(source)
        assert _rows(await ranker.generate_top_playing_now(BAND, PLATFORM)) == [("b", 1), ("a", 2)]
        assert _rows(await ranker.generate_top_earning(BAND, PLATFORM)) == [("a", 1), ("b", 2)]

    @pytest.mark.asyncio
    async def test_top_replayed_skips_games_without_players(self):
        source = FakeChartSource(
            games=[build_game("loyal"), build_game("ghost"), build_game("casual")],
            metrics={
                "loyal": GameMetrics(total_sessions=90, unique_players=10),
                "ghost": GameMetrics(total_sessions=0, unique_players=0),
                "casual": GameMetrics(total_sessions=12, unique_players=10),
            },
        )
        entries = await _ranker(source).generate_top_replayed(BAND, PLATFORM)
        assert [(e.game_id, e.score) for e in entries] == [("loyal", 9.0), ("casual", 1.2)]

    @pytest.mark.asyncio
    async def test_top_rated_skips_games_without_reactions(self):
        source = FakeChartSource(
            games=[build_game("loved"), build_game("quiet"), build_game("split")],
            metrics={
                "loved": GameMetrics(likes=999, dislikes=0),
                "quiet": GameMetrics(),
                "split": GameMetrics(likes=5, dislikes=5),
            },
        )
        entries = await _ranker(source).generate_top_rated(BAND, PLATFORM)
        assert _rows(entries) == [("loved", 1), ("split", 2)]
        assert entries[0].score == pytest.approx(1.0)
        assert entries[1].score == 0.0

    @pytest.mark.asyncio
    async def test_trending_in_genre_filters_by_genre(self):
        source = FakeChartSource(
            games=[
                build_game("rpg", genre_vector={7: 1.0}),
                build_game("mixed", genre_vector={3: 0.2, 7: 0.1}),
                build_game("racer", genre_vector={3: 1.0}),
            ],
            metrics={
                "rpg": GameMetrics(plays_last_7_days=20, plays_prev_7_days=10),
                "mixed": GameMetrics(plays_last_7_days=30, plays_prev_7_days=10),
                "racer": GameMetrics(plays_last_7_days=10**4),
            },
        )
        entries = await _ranker(source).generate_trending_in_genre(7, BAND, PLATFORM)
        assert _rows(entries) == [("mixed", 1), ("rpg", 2)]
        assert "racer" not in source.metrics_calls


class TestChartShape:
    @pytest.mark.asyncio
    async def test_ranks_contiguous_and_limited(self):
        games = [build_game(f"g{i:02d}") for i in range(12)]
        metrics = {g.game_id: GameMetrics(current_sessions=i) for i, g in enumerate(games)}
        source = FakeChartSource(games=games, metrics=metrics)
        entries = await _ranker(source).generate_top_playing_now(BAND, PLATFORM, limit=5)
        assert [e.rank for e in entries] == [1, 2, 3, 4, 5]
        assert [e.game_id for e in entries] == ["g11", "g10", "g09", "g08", "g07"]

    @pytest.mark.asyncio
    async def test_ties_broken_by_game_id(self):
        games = [build_game(gid) for gid in ["c", "a", "b"]]
        source = FakeChartSource(
            games=games, metrics={gid: GameMetrics(current_sessions=3) for gid in "abc"}
        )
        entries = await _ranker(source).generate_top_playing_now(BAND, PLATFORM)
        assert _rows(entries) == [("a", 1), ("b", 2), ("c", 3)]

    @pytest.mark.asyncio
    async def test_completion_order_does_not_change_ranking(self):
        games = [build_game(f"g{i}") for i in range(6)]
        metrics = {g.game_id: GameMetrics(total_revenue=float(i % 3)) for i, g in enumerate(games)}
        fast = FakeChartSource(games=games, metrics=metrics)
        slow_first = FakeChartSource(
            games=games,
            metrics=metrics,
            delays={g.game_id: 0.001 * (6 - i) for i, g in enumerate(games)},
        )
        expected = await _ranker(fast).generate_top_earning(BAND, PLATFORM)
        assert await _ranker(slow_first).generate_top_earning(BAND, PLATFORM) == expected

    @pytest.mark.asyncio
    async def test_duplicate_items_charted_once(self):
        source = FakeChartSource(games=[build_game("a"), build_game("a")])
        entries = await _ranker(source).generate_top_earning(BAND, PLATFORM)
        assert _rows(entries) == [("a", 1)]

    @pytest.mark.asyncio
    async def test_empty_candidate_set(self):
        entries = await _ranker(FakeChartSource()).generate_top_trending(BAND, PLATFORM)
        assert entries == []


class TestChartDispatch:
    @pytest.mark.asyncio
    async def test_trending_in_genre_requires_genre(self):
        source = FakeChartSource(games=[build_game("a")])
        with pytest.raises(InvalidChartRequest):
            await _ranker(source).generate_chart(ChartType.TRENDING_IN_GENRE, BAND, PLATFORM)
        assert source.items_calls == 0
        assert source.metrics_calls == []

    @pytest.mark.asyncio
    async def test_unknown_chart_type(self):
        source = FakeChartSource(games=[build_game("a")])
        with pytest.raises(InvalidChartRequest):
            await _ranker(source).generate_chart("TOP_VIRAL", BAND, PLATFORM)
        assert source.items_calls == 0

    @pytest.mark.asyncio
    async def test_negative_limit(self):
        with pytest.raises(InvalidChartRequest):
            await _ranker(FakeChartSource()).generate_chart(ChartType.TOP_EARNING, BAND, PLATFORM, limit=-1)

    @pytest.mark.asyncio
    async def test_zero_limit_skips_source(self):
        source = FakeChartSource(games=[build_game(f"g{i}") for i in range(5)])
        entries = await _ranker(source).generate_chart(ChartType.TOP_EARNING, BAND, PLATFORM, limit=0)
        assert entries == []
        assert source.items_calls == 0
        assert source.metrics_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chart_type", [t for t in ChartType if t != ChartType.TRENDING_IN_GENRE])
    async def test_dispatch_by_name(self, chart_type):
        source = FakeChartSource(
            games=[build_game("a", release_date=days_ago(1))],
            metrics={"a": GameMetrics(unique_players=1, total_sessions=2, likes=3)},
        )
        entries = await _ranker(source).generate_chart(chart_type.value, BAND, PLATFORM)
        assert _rows(entries) == [("a", 1)]

    @pytest.mark.asyncio
    async def test_dispatch_trending_in_genre(self):
        source = FakeChartSource(
            games=[build_game("a", genre_vector={4: 1.0}), build_game("b", genre_vector={5: 1.0})]
        )
        entries = await _ranker(source).generate_chart(
            ChartType.TRENDING_IN_GENRE, BAND, PLATFORM, genre_id=4
        )
        assert _rows(entries) == [("a", 1)]


class TestChartConcurrency:
    @pytest.mark.asyncio
    async def test_fetches_bounded_by_max_concurrency(self):
        games = [build_game(f"g{i}") for i in range(10)]
        source = FakeChartSource(games=games, delays={g.game_id: 0.01 for g in games})
        await _ranker(source, max_concurrency=3).generate_top_earning(BAND, PLATFORM)
        assert 1 < source.max_in_flight <= 3
        assert sorted(source.metrics_calls) == sorted(g.game_id for g in games)

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self):
        source = FakeChartSource(games=[build_game("a"), build_game("b")], fail_on={"b"})
        with pytest.raises(SourceUnavailableError):
            await _ranker(source).generate_top_trending(BAND, PLATFORM)

    @pytest.mark.asyncio
    async def test_failure_settles_sibling_fetches(self):
        source = FakeChartSource(
            games=[build_game("a"), build_game("b"), build_game("slow")],
            delays={"slow": 1.0},
            fail_on={"a", "b"},
        )
        with pytest.raises(SourceUnavailableError):
            await _ranker(source).generate_top_trending(BAND, PLATFORM)
        # The slow fetch was cancelled and finished before the error surfaced
        assert source.in_flight == 0

    @pytest.mark.asyncio
    async def test_timeout_becomes_source_unavailable(self):
        source = FakeChartSource(games=[build_game("slow")], delays={"slow": 1.0})
        with pytest.raises(SourceUnavailableError):
            await _ranker(source, fetch_timeout=0.01).generate_top_trending(BAND, PLATFORM)

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            ChartRanker(FakeChartSource(), max_concurrency=0)
