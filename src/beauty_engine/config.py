"""Engine configuration: tunable thresholds, colors and reference resolutions.

All pixel constants are expressed at a reference canvas size. Frames at other
resolutions rescale them by the ratio of frame diagonals (see
``scale_factor``). Brightness thresholds are on the 0-255 scale and were
chosen empirically; they are exposed here so they can be tuned.

Load from YAML:
    config = EngineConfig.from_yaml("beauty.yml")
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger("beauty_engine.config")

Color = tuple[int, int, int]


class ConfigError(ValueError):
    """Raised for invalid configuration values."""


def scale_factor(width: int, height: int, reference: tuple[int, int]) -> float:
    """Ratio of the frame diagonal to the reference canvas diagonal."""
    ref_w, ref_h = reference
    return math.hypot(width, height) / math.hypot(ref_w, ref_h)


@dataclass
class GestureConfig:
    lip_radius: float = 44.0
    cheek_radius: float = 56.0
    eye_radius: float = 52.0
    cooldown_seconds: float = 0.9
    feedback_seconds: float = 1.2
    reference_size: tuple[int, int] = (640, 480)


@dataclass
class OverlayConfig:
    lipstick_palette: list[Color] = field(default_factory=lambda: [
        (180, 76, 67),    # soft red
        (225, 170, 150),  # peach nude
        (190, 115, 120),  # dusty rose
    ])
    lipstick_alpha: float = 0.55
    blush_color: Color = (255, 105, 180)
    blush_alpha: float = 0.25
    blush_inner_radius: float = 6.0
    blush_outer_radius: float = 46.0
    eyeshadow_color: Color = (150, 100, 200)
    eyeshadow_alpha: float = 0.40
    reference_size: tuple[int, int] = (640, 480)


@dataclass
class SamplingConfig:
    radius_fraction: float = 0.08  # of inter-eye-corner distance
    min_radius: int = 4
    under_eye_factor: float = 0.75
    reference_size: tuple[int, int] = (720, 540)


@dataclass
class SkinThresholds:
    oily_brightness: float = 165.0
    dry_brightness: float = 105.0
    tzone_margin: float = 18.0
    redness: float = 14.0
    dark_circles: float = 22.0
    texture: float = 22.0


_SECTIONS = {
    "gesture": GestureConfig,
    "overlay": OverlayConfig,
    "sampling": SamplingConfig,
    "skin": SkinThresholds,
}


def _number(key: str, value, kind: type):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if kind is int and value != int(value):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return kind(value)


def _int_tuple(key: str, value, size: int) -> tuple:
    if not isinstance(value, (list, tuple)) or len(value) != size:
        raise ConfigError(f"{key} must be a list of {size} numbers, got {value!r}")
    return tuple(_number(key, v, int) for v in value)


def _coerce(key: str, value, default):
    """Convert a YAML value to the type of the field's default."""
    if isinstance(default, tuple):
        return _int_tuple(key, value, len(default))
    if isinstance(default, list):
        # lipstick palette: list of RGB triples
        if not isinstance(value, list):
            raise ConfigError(f"{key} must be a list of colors, got {value!r}")
        return [_int_tuple(key, c, 3) for c in value]
    return _number(key, value, type(default))


@dataclass
class EngineConfig:
    """Aggregate configuration for both pipelines."""
    gesture: GestureConfig = field(default_factory=GestureConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    skin: SkinThresholds = field(default_factory=SkinThresholds)

    def validate(self) -> EngineConfig:
        g, o, s = self.gesture, self.overlay, self.sampling
        for name in ("lip_radius", "cheek_radius", "eye_radius"):
            if getattr(g, name) <= 0:
                raise ConfigError(f"gesture.{name} must be positive")
        if g.cooldown_seconds < 0 or g.feedback_seconds < 0:
            raise ConfigError("gesture timings must be non-negative")
        if not o.lipstick_palette:
            raise ConfigError("overlay.lipstick_palette must not be empty")
        for name in ("lipstick_alpha", "blush_alpha", "eyeshadow_alpha"):
            if not 0.0 <= getattr(o, name) <= 1.0:
                raise ConfigError(f"overlay.{name} must be within [0, 1]")
        if not 0 <= o.blush_inner_radius < o.blush_outer_radius:
            raise ConfigError("overlay blush radii must satisfy 0 <= inner < outer")
        if s.radius_fraction <= 0 or s.under_eye_factor <= 0:
            raise ConfigError("sampling fractions must be positive")
        if s.min_radius < 0:
            raise ConfigError("sampling.min_radius must be non-negative")
        return self

    def to_dict(self) -> dict:
        data = asdict(self)
        for section in data.values():
            for key, value in section.items():
                if isinstance(value, tuple):
                    section[key] = list(value)
            if "lipstick_palette" in section:
                section["lipstick_palette"] = [list(c) for c in section["lipstick_palette"]]
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> EngineConfig:
        data = data or {}
        sections = {}
        for name, section_cls in _SECTIONS.items():
            raw = data.get(name) or {}
            if not isinstance(raw, dict):
                raise ConfigError(f"config section {name} must be a mapping")
            defaults = section_cls()
            known = {f.name for f in fields(section_cls)}
            kwargs = {}
            for key, value in raw.items():
                if key not in known:
                    logger.warning("Ignoring unknown config key %s.%s", name, key)
                    continue
                kwargs[key] = _coerce(f"{name}.{key}", value, getattr(defaults, key))
            sections[name] = section_cls(**kwargs)

        for name in data:
            if name not in _SECTIONS:
                logger.warning("Ignoring unknown config section %s", name)

        return cls(**sections).validate()

    @classmethod
    def from_yaml(cls, path: str | Path) -> EngineConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: invalid YAML: {e}") from e
        if data is not None and not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")
        logger.info("Loaded config from %s", path)
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path):
        """Save configuration to YAML."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[str | Path] = None) -> EngineConfig:
    """Load a config file, or the defaults when no path is given."""
    if path is None:
        return EngineConfig()
    return EngineConfig.from_yaml(path)
