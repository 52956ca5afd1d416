"""Tests for configuration loading and validation."""

import logging

import pytest
import yaml

from beauty_engine.config import (
    ConfigError,
    EngineConfig,
    OverlayConfig,
    load_config,
    scale_factor,
)


class TestScaleFactor:
    def test_reference_is_one(self):
        assert scale_factor(640, 480, (640, 480)) == pytest.approx(1.0)

    def test_double(self):
        assert scale_factor(1280, 960, (640, 480)) == pytest.approx(2.0)

    def test_uses_diagonal(self):
        # 640x640 vs 640x480: diagonal ratio, not width ratio
        assert scale_factor(640, 640, (640, 480)) == pytest.approx(905.097 / 800, rel=1e-5)


class TestDefaults:
    def test_gesture_defaults(self):
        g = EngineConfig().gesture
        assert (g.lip_radius, g.cheek_radius, g.eye_radius) == (44.0, 56.0, 52.0)
        assert g.cooldown_seconds == 0.9
        assert g.feedback_seconds == 1.2

    def test_overlay_defaults(self):
        o = EngineConfig().overlay
        assert o.lipstick_palette[0] == (180, 76, 67)
        assert len(o.lipstick_palette) == 3
        assert o.lipstick_alpha == 0.55

    def test_skin_defaults(self):
        s = EngineConfig().skin
        assert (s.oily_brightness, s.dry_brightness, s.tzone_margin) == (165.0, 105.0, 18.0)

    def test_defaults_validate(self):
        assert EngineConfig().validate() is not None

    def test_load_config_without_path(self):
        assert load_config() == EngineConfig()


class TestValidation:
    def test_negative_radius(self):
        cfg = EngineConfig()
        cfg.gesture.lip_radius = -1
        with pytest.raises(ConfigError):
            cfg.validate()

    def test_alpha_out_of_range(self):
        with pytest.raises(ConfigError):
            EngineConfig(overlay=OverlayConfig(blush_alpha=1.5)).validate()

    def test_empty_palette(self):
        with pytest.raises(ConfigError):
            EngineConfig(overlay=OverlayConfig(lipstick_palette=[])).validate()

    def test_blush_radii_order(self):
        with pytest.raises(ConfigError):
            EngineConfig(overlay=OverlayConfig(blush_inner_radius=50.0)).validate()

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestYaml:
    def test_roundtrip(self, tmp_path):
        path = tmp_path / "cfg.yml"
        cfg = EngineConfig()
        cfg.gesture.cooldown_seconds = 0.5
        cfg.overlay.lipstick_palette = [(1, 2, 3)]
        cfg.to_yaml(path)

        loaded = EngineConfig.from_yaml(path)
        assert loaded == cfg
        assert loaded.gesture.reference_size == (640, 480)
        assert loaded.overlay.lipstick_palette == [(1, 2, 3)]

    def test_yaml_is_plain_lists(self, tmp_path):
        path = tmp_path / "cfg.yml"
        EngineConfig().to_yaml(path)
        data = yaml.safe_load(path.read_text())
        assert data["sampling"]["reference_size"] == [720, 540]

    def test_partial_file(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("skin:\n  redness: 20\n")
        cfg = load_config(path)
        assert cfg.skin.redness == 20
        assert cfg.skin.texture == 22.0
        assert cfg.gesture == EngineConfig().gesture

    def test_empty_file(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("")
        assert load_config(path) == EngineConfig()

    def test_unknown_keys_warn(self, tmp_path, caplog):
        path = tmp_path / "cfg.yml"
        path.write_text("gesture:\n  wave_radius: 3\nserver:\n  port: 1\n")
        with caplog.at_level(logging.WARNING, logger="beauty_engine.config"):
            cfg = load_config(path)
        assert cfg == EngineConfig()
        assert "gesture.wave_radius" in caplog.text
        assert "server" in caplog.text

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_values_rejected(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("overlay:\n  lipstick_alpha: 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_config(tmp_path / "missing.yml")


class TestMalformedConfig:
    def test_section_not_a_mapping(self):
        with pytest.raises(ConfigError, match="gesture"):
            EngineConfig.from_dict({"gesture": 5})

    def test_wrong_value_type(self):
        with pytest.raises(ConfigError, match="gesture.lip_radius"):
            EngineConfig.from_dict({"gesture": {"lip_radius": "big"}})

    def test_bool_is_not_a_number(self):
        with pytest.raises(ConfigError):
            EngineConfig.from_dict({"skin": {"redness": True}})

    def test_fractional_integer_rejected(self):
        with pytest.raises(ConfigError, match="min_radius"):
            EngineConfig.from_dict({"sampling": {"min_radius": 2.5}})

    def test_bad_color(self):
        with pytest.raises(ConfigError, match="blush_color"):
            EngineConfig.from_dict({"overlay": {"blush_color": [255, 0]}})
        with pytest.raises(ConfigError, match="lipstick_palette"):
            EngineConfig.from_dict({"overlay": {"lipstick_palette": "red"}})

    def test_ints_coerced_to_floats(self):
        cfg = EngineConfig.from_dict({"gesture": {"lip_radius": 40}})
        assert cfg.gesture.lip_radius == 40.0
        assert isinstance(cfg.gesture.lip_radius, float)

    def test_yaml_syntax_error(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("gesture: [unclosed\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(path)
