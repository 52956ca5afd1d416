"""Structured skin report built from one analysed frame."""

from __future__ import annotations

from dataclasses import dataclass, field

from beauty_engine.sampler import FaceRegions
from beauty_engine.skin import SkinProfile

REGION_LABELS = {
    "forehead": "Forehead",
    "nose": "Nose",
    "left_cheek": "Left cheek",
    "right_cheek": "Right cheek",
    "chin": "Chin",
    "under_eyes_avg": "Under-eyes (avg)",
}

# observation -> (present, absent)
OBSERVATION_TEXT = {
    "redness": ("Cheek redness present.", "No marked cheek redness."),
    "dark_circles": ("Under-eye shadows observed.", "No significant under-eye darkness."),
    "texture_uneven": ("Texture appears slightly uneven.", "Texture appears even."),
}


@dataclass
class SkinReport:
    skin_type: str
    region_means: dict[str, float]
    observations: dict[str, bool]
    recommendations: list[str] = field(default_factory=list)

    def observation_lines(self) -> list[str]:
        return [
            OBSERVATION_TEXT[key][0 if present else 1]
            for key, present in self.observations.items()
        ]

    def to_dict(self) -> dict:
        return {
            "skin_type": self.skin_type,
            "region_means": dict(self.region_means),
            "observations": dict(self.observations),
            "recommendations": list(self.recommendations),
        }

    def format_text(self) -> str:
        """Plain-text rendering of the report."""
        lines = [
            "Skin Analysis Report",
            f"Overall skin type: {self.skin_type}",
            "",
            f"{'Region':<18}Mean brightness",
        ]
        for key, label in REGION_LABELS.items():
            lines.append(f"{label:<18}{self.region_means[key]:.1f}")
        lines += ["", "Observations"]
        lines += [f"  - {line}" for line in self.observation_lines()]
        lines += ["", "Recommendations"]
        lines += [f"  - {rec}" for rec in self.recommendations]
        return "\n".join(lines)


def build_report(
    regions: FaceRegions, profile: SkinProfile, recommendations: list[str]
) -> SkinReport:
    return SkinReport(
        skin_type=profile.skin_type.value,
        region_means={
            "forehead": regions.forehead.mean,
            "nose": regions.nose.mean,
            "left_cheek": regions.left_cheek.mean,
            "right_cheek": regions.right_cheek.mean,
            "chin": regions.chin.mean,
            "under_eyes_avg": regions.under_eyes_mean,
        },
        observations={
            "redness": profile.has_redness,
            "dark_circles": profile.has_dark_circles,
            "texture_uneven": profile.coarse_texture,
        },
        recommendations=list(recommendations),
    )
