"""
Data Model Tests

AgeBand ordering is load-bearing for eligibility: comparisons must go through
the ordinal, never the string value ("AGE_13_PLUS" < "UNDER_9" as strings).

Run:
----
    pytest tests/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from game_ranking.models import (
    AgeBand,
    DiversityDiagnostics,
    Game,
    GameFeature,
    ensure_game_by_id,
    ensure_games,
)
from game_ranking.stages.diversity import genre_stats

from fakes import build_game, build_scored, days_ago


class TestAgeBand:
    def test_ordinals(self):
        assert [b.ordinal for b in AgeBand] == [0, 1, 2]

    def test_comparison_uses_ordinal_not_string(self):
        # As plain strings "AGE_13_PLUS" < "UNDER_9"; as bands it is the opposite.
        assert AgeBand.UNDER_9 < AgeBand.AGE_13_PLUS
        assert AgeBand.AGE_13_PLUS > AgeBand.AGE_9_TO_12
        assert AgeBand.AGE_9_TO_12 <= AgeBand.AGE_9_TO_12
        assert sorted([AgeBand.AGE_13_PLUS, AgeBand.UNDER_9, AgeBand.AGE_9_TO_12]) == [
            AgeBand.UNDER_9,
            AgeBand.AGE_9_TO_12,
            AgeBand.AGE_13_PLUS,
        ]

    def test_comparison_with_plain_string_uses_ordinal(self):
        assert AgeBand.UNDER_9 < "AGE_13_PLUS"
        assert AgeBand.AGE_13_PLUS >= "UNDER_9"
        assert not AgeBand.AGE_9_TO_12 > "AGE_13_PLUS"
        with pytest.raises(ValueError):
            AgeBand.UNDER_9 < "ADULT"

    def test_parses_from_string(self):
        assert AgeBand("AGE_9_TO_12") is AgeBand.AGE_9_TO_12


class TestGame:
    def test_creation_date_defaults_to_release_date(self):
        game = build_game("g1", creation_date=None, release_date=days_ago(10))
        assert game.creation_date == game.release_date

    def test_negative_genre_weight_rejected(self):
        with pytest.raises(ValidationError):
            build_game("g1", genre_vector={1: -0.5})

    def test_moderation_score_bounds(self):
        with pytest.raises(ValidationError):
            build_game("g1", moderation_score=1.5)

    def test_features_from_list(self):
        game = build_game("g1", features=["VOICE_CHAT", "MULTIPLAYER"])
        assert game.has_feature(GameFeature.VOICE_CHAT)
        assert not game.has_feature(GameFeature.LOW_INTENSITY)

    def test_plays_for_missing_band_is_zero(self):
        game = build_game("g1", plays_by_age_band={"UNDER_9": 12})
        assert game.plays_for(AgeBand.UNDER_9) == 12
        assert game.plays_for(AgeBand.AGE_13_PLUS) == 0

    def test_negative_play_count_rejected(self):
        with pytest.raises(ValidationError):
            build_game("bad", plays_by_age_band={"UNDER_9": -3})

    def test_dict_records_normalized(self):
        record = build_game("g1").model_dump()
        games = ensure_games([record, build_game("g2")])
        assert [g.game_id for g in games] == ["g1", "g2"]
        assert all(isinstance(g, Game) for g in games)
        by_id = ensure_game_by_id({"g1": record})
        assert by_id["g1"] == games[0]
        assert ensure_game_by_id(None) == {}

    def test_frozen(self):
        game = build_game("g1")
        with pytest.raises(ValidationError):
            game.moderation_score = 0.1


class TestDiagnostics:
    def test_messages(self):
        d = DiversityDiagnostics(
            unique_genres=1, min_genres=2, low_intensity_required=True, has_low_intensity=False
        )
        assert not d.ok
        assert d.messages() == [
            "Only 1 genres in recommendations (minimum: 2)",
            "No low-intensity game in recommendations",
        ]

    def test_ok_when_not_required(self):
        d = DiversityDiagnostics(unique_genres=3, min_genres=2, low_intensity_required=False)
        assert d.ok
        assert d.messages() == []

    def test_genre_stats(self):
        games = [
            build_scored("a", genre_vector={1: 1.0, 2: 0.5}),
            build_scored("b", genre_vector={2: 1.0}),
        ]
        assert genre_stats(games) == {1: 1, 2: 2}
