"""Landmark index tables and pixel-space helpers.

Face indices follow the 468-point MediaPipe FaceMesh topology, hand indices
the 21-point MediaPipe Hands topology. Coordinates arrive normalized to
[0, 1] relative to frame width/height; only x and y are ever read.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

# Face mesh
NOSE_TIP = 1
FOREHEAD = 10
CHIN = 152
LEFT_EYE_OUTER = 33
RIGHT_EYE_OUTER = 263
LEFT_CHEEK = 234
RIGHT_CHEEK = 454
UNDER_LEFT_EYE = 145
UNDER_RIGHT_EYE = 374
LIP_CORNER = 61

LIP_CONTOUR = [
    61, 185, 40, 39, 37, 0, 267, 269, 270, 409,
    291, 375, 321, 405, 314, 17, 84, 181, 91, 146,
]
LEFT_EYESHADOW = [33, 246, 161, 160, 159, 158, 157, 173]
RIGHT_EYESHADOW = [362, 398, 384, 385, 386, 387, 388, 466]
CHEEKS = [LEFT_CHEEK, RIGHT_CHEEK]

# Hands
HAND_LANDMARK_COUNT = 21
INDEX_PIP, INDEX_TIP = 6, 8
MIDDLE_PIP, MIDDLE_TIP = 10, 12
RING_PIP, RING_TIP = 14, 16
PINKY_PIP, PINKY_TIP = 18, 20

# (fingertip, proximal knuckle) pairs
FINGER_PAIRS = [
    (INDEX_TIP, INDEX_PIP),
    (MIDDLE_TIP, MIDDLE_PIP),
    (RING_TIP, RING_PIP),
    (PINKY_TIP, PINKY_PIP),
]


def as_landmarks(points) -> Optional[np.ndarray]:
    """Coerce a landmark sequence to a float ``(N, 2)`` array.

    ``None`` and empty input mean "not detected" and return ``None``.

    Raises:
        ValueError: if the input is not a 2-D array with at least two columns.
    """
    if points is None:
        return None
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return None
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(
            f"landmarks must have shape (N, 2) or (N, 3), got {arr.shape}"
        )
    return arr[:, :2]


def _check_index(landmarks: np.ndarray, index: int):
    if not 0 <= index < len(landmarks):
        raise ValueError(
            f"landmark index {index} out of range for {len(landmarks)} points"
        )


def to_pixel(
    landmarks: np.ndarray, index: int, width: int, height: int
) -> tuple[float, float]:
    """Scale a normalized landmark to pixel coordinates."""
    _check_index(landmarks, index)
    x, y = landmarks[index][:2]
    return float(x) * width, float(y) * height


def to_pixel_int(
    landmarks: np.ndarray, index: int, width: int, height: int
) -> tuple[int, int]:
    """Pixel coordinates rounded half-up to the nearest integer pixel."""
    x, y = to_pixel(landmarks, index, width, height)
    return math.floor(x + 0.5), math.floor(y + 0.5)


def pixel_distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))


def pixel_polygon(
    landmarks: np.ndarray, indices: Sequence[int], width: int, height: int
) -> np.ndarray:
    """Polygon vertices in pixel space, shape (K, 2), int32 for cv2.fillPoly."""
    for idx in indices:
        _check_index(landmarks, idx)
    pts = landmarks[list(indices), :2] * np.array([width, height], dtype=np.float64)
    return np.round(pts).astype(np.int32)
