"""Disc sampling of pixel statistics around face landmarks.

The sampling radius scales with the face: a fixed fraction of the pixel
distance between the outer eye corners, so results don't depend on how far
the subject sits from the camera.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Optional

import numpy as np

from beauty_engine import landmarks as lm
from beauty_engine.config import SamplingConfig


@dataclass(frozen=True)
class RegionStats:
    """Per-channel means plus brightness mean/std over one sampled disc."""
    r: float
    g: float
    b: float
    mean: float
    std: float
    pixels: int = 0

    @classmethod
    def zero(cls) -> RegionStats:
        return cls(r=0.0, g=0.0, b=0.0, mean=0.0, std=0.0, pixels=0)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FaceRegions:
    """The seven named samples the skin classifier consumes."""
    forehead: RegionStats
    nose: RegionStats
    left_cheek: RegionStats
    right_cheek: RegionStats
    chin: RegionStats
    under_left_eye: RegionStats
    under_right_eye: RegionStats

    @property
    def cheeks_mean(self) -> float:
        return (self.left_cheek.mean + self.right_cheek.mean) / 2

    @property
    def under_eyes_mean(self) -> float:
        return (self.under_left_eye.mean + self.under_right_eye.mean) / 2


# region name -> face landmark index
REGION_LANDMARKS = {
    "forehead": lm.FOREHEAD,
    "nose": lm.NOSE_TIP,
    "left_cheek": lm.LEFT_CHEEK,
    "right_cheek": lm.RIGHT_CHEEK,
    "chin": lm.CHIN,
    "under_left_eye": lm.UNDER_LEFT_EYE,
    "under_right_eye": lm.UNDER_RIGHT_EYE,
}
UNDER_EYE_REGIONS = {"under_left_eye", "under_right_eye"}


def disc_stats(frame: np.ndarray, cx: int, cy: int, radius: int) -> RegionStats:
    """Statistics over pixels with ``dx² + dy² <= radius²`` around (cx, cy).

    The candidate box spans ``[c - radius, c + radius)`` on each axis and is
    clipped to the frame. Empty discs yield ``RegionStats.zero()``.
    """
    h, w = frame.shape[:2]
    x0, x1 = max(cx - radius, 0), min(cx + radius, w)
    y0, y1 = max(cy - radius, 0), min(cy + radius, h)
    if radius <= 0 or x0 >= x1 or y0 >= y1:
        return RegionStats.zero()

    ys, xs = np.mgrid[y0:y1, x0:x1]
    inside = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius
    n = int(np.count_nonzero(inside))
    if n == 0:
        return RegionStats.zero()

    pixels = frame[y0:y1, x0:x1][inside][:, :3].astype(np.float64)
    channel_means = pixels.sum(axis=0) / n
    brightness = pixels.mean(axis=1)
    mean = float(brightness.sum() / n)
    variance = float((brightness * brightness).sum() / n) - mean * mean
    return RegionStats(
        r=float(channel_means[0]),
        g=float(channel_means[1]),
        b=float(channel_means[2]),
        mean=mean,
        std=float(np.sqrt(max(variance, 0.0))),
        pixels=n,
    )


class RegionSampler:
    """Samples face regions from an RGB frame."""

    def __init__(self, config: Optional[SamplingConfig] = None):
        self.config = config or SamplingConfig()

    def sample(self, frame: np.ndarray, face, index: int, radius_px: int) -> RegionStats:
        """Disc statistics centered on face landmark ``index``.

        Deterministic for identical inputs; never raises for discs that fall
        partly or wholly outside the frame.
        """
        face = lm.as_landmarks(face)
        if face is None:
            return RegionStats.zero()
        h, w = frame.shape[:2]
        cx, cy = lm.to_pixel_int(face, index, w, h)
        return disc_stats(frame, cx, cy, int(radius_px))

    @staticmethod
    def face_scale(face, width: int, height: int) -> float:
        """Pixel distance between the outer eye corners."""
        face = lm.as_landmarks(face)
        if face is None:
            raise ValueError("face landmarks are required to measure face scale")
        a = lm.to_pixel(face, lm.LEFT_EYE_OUTER, width, height)
        b = lm.to_pixel(face, lm.RIGHT_EYE_OUTER, width, height)
        return lm.pixel_distance(a, b)

    def sampling_radius(self, face_scale: float) -> int:
        c = self.config
        return max(c.min_radius, math.floor(face_scale * c.radius_fraction + 0.5))

    def under_eye_radius(self, radius: int) -> int:
        return math.floor(radius * self.config.under_eye_factor + 0.5)

    def sample_regions(self, frame: np.ndarray, face) -> FaceRegions:
        """Sample all seven named regions with a radius derived once per frame."""
        face = lm.as_landmarks(face)
        if face is None:
            raise ValueError("face landmarks are required for region sampling")
        h, w = frame.shape[:2]
        radius = self.sampling_radius(self.face_scale(face, w, h))
        small = self.under_eye_radius(radius)

        stats = {}
        for name, index in REGION_LANDMARKS.items():
            r = small if name in UNDER_EYE_REGIONS else radius
            stats[name] = self.sample(frame, face, index, r)
        return FaceRegions(**stats)
