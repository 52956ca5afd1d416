"""Rule table mapping a SkinProfile to ordered skincare advice.

The base block for the skin type always comes first, followed by the
redness, dark-circle and texture advisories in that order when they apply.

The table can be overridden from YAML:

    base:
      Oily: ["...", "..."]
      Dry: ["..."]
      Normal: ["..."]
      Combination (T-zone oily): ["..."]
    redness: "..."
    dark_circles: "..."
    texture: "..."
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from beauty_engine.config import ConfigError
from beauty_engine.skin import SkinProfile, SkinType

logger = logging.getLogger("beauty_engine.recommendations")


DEFAULT_BASE = {
    SkinType.OILY: [
        "Use a gentle foaming cleanser and a non-comedogenic, oil-free moisturizer.",
        "Introduce 2% salicylic acid or niacinamide (4–10%) to control sebum.",
        "Prefer mineral or gel sunscreen labeled 'oil-free' (SPF 30+).",
    ],
    SkinType.DRY: [
        "Use a low-pH hydrating cleanser; avoid harsh scrubs.",
        "Moisturize with ceramides and hyaluronic acid; consider occlusives at night.",
        "Apply broad-spectrum SPF 30+ daily to prevent further barrier stress.",
    ],
    SkinType.COMBINATION: [
        "Use a balancing routine: gel textures on the T-zone, richer cream on cheeks.",
        "Spot-treat the T-zone with niacinamide or salicylic acid 2–3×/week.",
        "Choose a lightweight, non-comedogenic sunscreen.",
    ],
    SkinType.NORMAL: [
        "Maintain a consistent routine: gentle cleanse, moisturize, and daily SPF 30+.",
    ],
}

DEFAULT_REDNESS = (
    "Cheek redness detected: consider azelaic acid (10%) or niacinamide; "
    "avoid alcohol-heavy products."
)
DEFAULT_DARK_CIRCLES = (
    "Under-eye darkness noted: prioritize sleep/hydration; "
    "consider caffeine or vitamin K eye formulations."
)
DEFAULT_TEXTURE = (
    "Uneven texture observed: gentle chemical exfoliation "
    "(lactic acid 5–10% weekly) may help."
)


@dataclass
class RecommendationRules:
    base: dict[SkinType, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BASE.items()}
    )
    redness: str = DEFAULT_REDNESS
    dark_circles: str = DEFAULT_DARK_CIRCLES
    texture: str = DEFAULT_TEXTURE

    def validate(self) -> RecommendationRules:
        missing = [t.value for t in SkinType if t not in self.base]
        if missing:
            raise ConfigError(f"recommendation table missing skin types: {missing}")
        for skin_type, block in self.base.items():
            if not 1 <= len(block) <= 3:
                raise ConfigError(
                    f"base block for {skin_type.value} must hold 1-3 entries, got {len(block)}"
                )
        return self


class RecommendationEngine:
    """Deterministic lookup from SkinProfile to advisory strings."""

    def __init__(self, rules: RecommendationRules | None = None):
        self.rules = (rules or RecommendationRules()).validate()

    def recommend(self, profile: SkinProfile) -> list[str]:
        recs = list(self.rules.base[profile.skin_type])
        if profile.has_redness:
            recs.append(self.rules.redness)
        if profile.has_dark_circles:
            recs.append(self.rules.dark_circles)
        if profile.coarse_texture:
            recs.append(self.rules.texture)
        return recs

    @classmethod
    def from_yaml(cls, path: str | Path) -> RecommendationEngine:
        """Load a rule table; keys left out fall back to the defaults."""
        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")

        base = data.get("base") or {}
        if not isinstance(base, dict):
            raise ConfigError(f"{path}: base must map skin types to lists of advice")

        rules = RecommendationRules()
        for name, block in base.items():
            try:
                skin_type = SkinType(name)
            except ValueError:
                raise ConfigError(f"unknown skin type in recommendation table: {name!r}") from None
            if not isinstance(block, list) or not all(isinstance(s, str) for s in block):
                raise ConfigError(f"base block for {name} must be a list of strings")
            rules.base[skin_type] = list(block)
        for key in ("redness", "dark_circles", "texture"):
            if key in data:
                if not isinstance(data[key], str):
                    raise ConfigError(f"{key} advice must be a string, got {data[key]!r}")
                setattr(rules, key, data[key])

        logger.info("Loaded recommendation rules from %s", path)
        return cls(rules)

    def to_yaml(self, path: str | Path):
        data = {
            "base": {t.value: list(block) for t, block in self.rules.base.items()},
            "redness": self.rules.redness,
            "dark_circles": self.rules.dark_circles,
            "texture": self.rules.texture,
        }
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
