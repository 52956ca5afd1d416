"""Threshold-based skin classification from sampled face regions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from beauty_engine.config import SkinThresholds
from beauty_engine.sampler import FaceRegions


class SkinType(Enum):
    NORMAL = "Normal"
    OILY = "Oily"
    DRY = "Dry"
    COMBINATION = "Combination (T-zone oily)"


@dataclass(frozen=True)
class SkinProfile:
    """Skin type plus independent observation flags and their raw scores."""
    skin_type: SkinType
    redness_score: float
    has_redness: bool
    has_dark_circles: bool
    coarse_texture: bool
    dark_circle_delta: float = 0.0
    texture_score: float = 0.0


class SkinClassifier:
    """Derives a SkinProfile from region brightness and color statistics.

    Skin type is decided first-match-wins: all four zones bright -> Oily,
    all four dark -> Dry, forehead and nose both brighter than the cheeks by
    a margin -> Combination, otherwise Normal. The zones are forehead, nose,
    the averaged cheeks and chin. Redness, dark circles and coarse texture
    are layered on top independently.
    """

    def __init__(self, thresholds: Optional[SkinThresholds] = None):
        self.thresholds = thresholds or SkinThresholds()

    def skin_type(self, regions: FaceRegions) -> SkinType:
        t = self.thresholds
        cheeks = regions.cheeks_mean
        zones = [regions.forehead.mean, regions.nose.mean, cheeks, regions.chin.mean]

        if all(v > t.oily_brightness for v in zones):
            return SkinType.OILY
        if all(v < t.dry_brightness for v in zones):
            return SkinType.DRY
        if (regions.forehead.mean > cheeks + t.tzone_margin
                and regions.nose.mean > cheeks + t.tzone_margin):
            return SkinType.COMBINATION
        return SkinType.NORMAL

    @staticmethod
    def redness_score(regions: FaceRegions) -> float:
        """Cheek red dominance: mean R minus the mean of G and B."""
        lc, rc = regions.left_cheek, regions.right_cheek
        cheek_r = (lc.r + rc.r) / 2
        cheek_g = (lc.g + rc.g) / 2
        cheek_b = (lc.b + rc.b) / 2
        return cheek_r - (cheek_g + cheek_b) / 2

    @staticmethod
    def texture_score(regions: FaceRegions) -> float:
        cheeks_std = (regions.left_cheek.std + regions.right_cheek.std) / 2
        return (cheeks_std + regions.forehead.std) / 2

    def classify(self, regions: FaceRegions) -> SkinProfile:
        t = self.thresholds
        redness = self.redness_score(regions)
        dark_delta = regions.cheeks_mean - regions.under_eyes_mean
        texture = self.texture_score(regions)

        return SkinProfile(
            skin_type=self.skin_type(regions),
            redness_score=redness,
            has_redness=redness > t.redness,
            has_dark_circles=dark_delta > t.dark_circles,
            coarse_texture=texture > t.texture,
            dark_circle_delta=dark_delta,
            texture_score=texture,
        )
