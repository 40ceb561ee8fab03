"""
Configuration Tests

RankingConfig is a single versioned schema: version 2 carries nine weights;
version 1 documents (six weights, camelCase keys) still load, with the
missing weights taking defaults. Configs are frozen; overrides build new ones.

Run:
----
    pytest tests/test_config.py -v
"""

import json
import math

import pytest
from pydantic import ValidationError

from game_ranking import compute_parameters
from game_ranking.models import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_CONFIG,
    RankingConfig,
    load_config,
    resolve_config,
)

# The six-weight document shape used by the first config revision.
V1_DOCUMENT = {
    "weights": {
        "genreAffinity": 1.2,
        "ageBandPopularity": 0.8,
        "engagementSimilarity": 0.9,
        "recencyBoost": 0.5,
        "sponsoredBoost": 0.3,
        "repetitionPenalty": 2.0,
    },
    "moderationThreshold": 0.85,
    "recencyDecayDays": 60,
    "sponsoredAmountMultiplier": 0.002,
    "maxSponsoredBoost": 1.5,
    "maxResults": 20,
    "maxSponsoredPerList": 2,
    "diversityRules": {
        "minGenres": 3,
        "maxPerGenre": 4,
        "requireLowIntensity": False,
        "avoidAllMultiplayer": True,
    },
}


class TestDefaults:
    def test_defaults(self):
        cfg = RankingConfig()
        assert cfg.schema_version == CONFIG_SCHEMA_VERSION
        assert cfg.moderation_threshold == 0.8
        assert cfg.recency_decay_days == 90
        assert cfg.sponsored_amount_multiplier == 0.001
        assert cfg.max_sponsored_boost == 2.0
        assert cfg.max_results == 50
        assert cfg.max_sponsored_per_list == 3
        assert cfg.weights.repetition_penalty == 2.0
        assert cfg.diversity_rules.max_per_genre == 5

    def test_resolve_config(self):
        assert resolve_config(None) is DEFAULT_CONFIG
        custom = RankingConfig(max_results=5)
        assert resolve_config(custom) is custom


class TestFromDict:
    def test_v1_camel_case_document(self):
        cfg = RankingConfig.from_dict(V1_DOCUMENT)
        assert cfg.schema_version == CONFIG_SCHEMA_VERSION
        assert cfg.weights.genre_affinity == 1.2
        assert cfg.moderation_threshold == 0.85
        assert cfg.recency_decay_days == 60
        assert cfg.max_results == 20
        assert cfg.diversity_rules.min_genres == 3
        assert cfg.diversity_rules.require_low_intensity is False
        # Weights missing from v1 take defaults
        assert cfg.weights.favourite_affinity == DEFAULT_CONFIG.weights.favourite_affinity
        assert cfg.weights.creation_recency_penalty == DEFAULT_CONFIG.weights.creation_recency_penalty

    def test_unknown_keys_ignored(self):
        cfg = RankingConfig.from_dict({"max_results": 7, "not_a_setting": True})
        assert cfg.max_results == 7

    def test_newer_schema_rejected(self):
        with pytest.raises(ValueError):
            RankingConfig.from_dict({"schema_version": CONFIG_SCHEMA_VERSION + 1})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"moderation_threshold": 1.5},
            {"recency_decay_days": 0},
            {"max_results": 0},
            {"sponsored_amount_multiplier": -1},
            {"creation_grace_period_days": 30, "creation_penalty_max_days": 30},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            RankingConfig.from_dict(overrides)


class TestOverrides:
    def test_with_overrides_returns_new_config(self):
        base = RankingConfig()
        updated = base.with_overrides({"weights": {"genreAffinity": 3.0}, "max_results": 10})
        assert updated is not base
        assert updated.weights.genre_affinity == 3.0
        assert updated.max_results == 10
        # Untouched values survive the deep merge
        assert updated.weights.recency_boost == base.weights.recency_boost
        # Base config is unchanged
        assert base.weights.genre_affinity == 1.0
        assert base.max_results == 50

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.max_results = 1


class TestLoadConfig:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "ranking.json"
        path.write_text(json.dumps(V1_DOCUMENT))
        cfg = load_config(path)
        assert cfg.max_sponsored_per_list == 2

    def test_no_path_is_default(self):
        assert load_config(None) is DEFAULT_CONFIG


class TestComputedParameters:
    def test_derived_values(self):
        computed = compute_parameters(DEFAULT_CONFIG)
        assert computed["recency_half_life_days"] == pytest.approx(math.log(2) * 90)
        assert computed["sponsored_amount_at_cap"] == pytest.approx(2000.0)
        assert computed["creation_penalty_decay_days"] == 23
        assert computed["max_total_penalty"] == pytest.approx(3.0)
        assert computed["min_genres_to_fill_list"] == 10
        assert computed["max_list_length_with_sponsored"] == 53
        shares = [v for k, v in computed.items() if k.startswith("share_")]
        assert sum(shares) == pytest.approx(1.0)

    def test_zero_multiplier_never_saturates(self):
        cfg = RankingConfig(sponsored_amount_multiplier=0.0)
        assert compute_parameters(cfg)["sponsored_amount_at_cap"] == float("inf")
