"""Tests for the recommendation rule table."""

import pytest
import yaml

from beauty_engine.config import ConfigError
from beauty_engine.recommendations import (
    DEFAULT_BASE,
    DEFAULT_DARK_CIRCLES,
    DEFAULT_REDNESS,
    DEFAULT_TEXTURE,
    RecommendationEngine,
    RecommendationRules,
)
from beauty_engine.skin import SkinProfile, SkinType


def profile(skin_type=SkinType.NORMAL, redness=False, dark=False, texture=False):
    return SkinProfile(
        skin_type=skin_type,
        redness_score=0.0,
        has_redness=redness,
        has_dark_circles=dark,
        coarse_texture=texture,
    )


class TestRecommend:
    @pytest.mark.parametrize("skin_type", list(SkinType))
    def test_base_block_only(self, skin_type):
        recs = RecommendationEngine().recommend(profile(skin_type))
        assert recs == DEFAULT_BASE[skin_type]
        assert 1 <= len(recs) <= 3

    def test_normal_single_entry(self):
        assert len(RecommendationEngine().recommend(profile())) == 1

    def test_all_flags_in_order(self):
        recs = RecommendationEngine().recommend(
            profile(SkinType.OILY, redness=True, dark=True, texture=True)
        )
        assert recs[:3] == DEFAULT_BASE[SkinType.OILY]
        assert recs[3:] == [DEFAULT_REDNESS, DEFAULT_DARK_CIRCLES, DEFAULT_TEXTURE]

    def test_single_flag(self):
        recs = RecommendationEngine().recommend(profile(SkinType.DRY, texture=True))
        assert recs[-1] == DEFAULT_TEXTURE
        assert len(recs) == 4

    def test_does_not_mutate_table(self):
        engine = RecommendationEngine()
        recs = engine.recommend(profile(redness=True))
        recs.clear()
        assert len(engine.recommend(profile())) == 1


class TestRules:
    def test_missing_type_rejected(self):
        rules = RecommendationRules()
        del rules.base[SkinType.DRY]
        with pytest.raises(ConfigError, match="Dry"):
            RecommendationEngine(rules)

    def test_oversized_block_rejected(self):
        rules = RecommendationRules()
        rules.base[SkinType.NORMAL] = ["a", "b", "c", "d"]
        with pytest.raises(ConfigError):
            RecommendationEngine(rules)

    def test_defaults_are_copied(self):
        rules = RecommendationRules()
        rules.base[SkinType.NORMAL].append("extra")
        assert len(DEFAULT_BASE[SkinType.NORMAL]) == 1


class TestYaml:
    def test_roundtrip(self, tmp_path):
        path = tmp_path / "recs.yml"
        RecommendationEngine().to_yaml(path)
        loaded = RecommendationEngine.from_yaml(path)
        p = profile(SkinType.COMBINATION, redness=True, dark=True, texture=True)
        assert loaded.recommend(p) == RecommendationEngine().recommend(p)

    def test_partial_override(self, tmp_path):
        path = tmp_path / "recs.yml"
        path.write_text(yaml.dump({
            "base": {"Normal": ["Drink water."]},
            "redness": "Calm it down.",
        }))
        engine = RecommendationEngine.from_yaml(path)
        assert engine.recommend(profile(redness=True)) == ["Drink water.", "Calm it down."]
        assert engine.recommend(profile(SkinType.OILY)) == DEFAULT_BASE[SkinType.OILY]

    def test_unknown_skin_type(self, tmp_path):
        path = tmp_path / "recs.yml"
        path.write_text(yaml.dump({"base": {"Greasy": ["x"]}}))
        with pytest.raises(ConfigError, match="Greasy"):
            RecommendationEngine.from_yaml(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "recs.yml"
        path.write_text("")
        engine = RecommendationEngine.from_yaml(path)
        assert engine.recommend(profile()) == DEFAULT_BASE[SkinType.NORMAL]

    def test_scalar_block_rejected(self, tmp_path):
        path = tmp_path / "recs.yml"
        path.write_text("base:\n  Normal: abc\n")
        with pytest.raises(ConfigError, match="Normal"):
            RecommendationEngine.from_yaml(path)

    def test_non_string_entries_rejected(self, tmp_path):
        path = tmp_path / "recs.yml"
        path.write_text(yaml.dump({"base": {"Dry": ["ok", 3]}}))
        with pytest.raises(ConfigError):
            RecommendationEngine.from_yaml(path)

    def test_non_string_advisory_rejected(self, tmp_path):
        path = tmp_path / "recs.yml"
        path.write_text(yaml.dump({"texture": ["a", "b"]}))
        with pytest.raises(ConfigError, match="texture"):
            RecommendationEngine.from_yaml(path)

    @pytest.mark.parametrize("text", ["- a\n- b\n", "base: [a, b]\n", "base: {Normal: [unclosed\n"])
    def test_malformed_table(self, tmp_path, text):
        path = tmp_path / "recs.yml"
        path.write_text(text)
        with pytest.raises(ConfigError):
            RecommendationEngine.from_yaml(path)
