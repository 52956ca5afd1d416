"""Synthetic face/hand landmarks shared across tests.

The face is laid out on a 640x480 canvas so that the lip corner, cheek and
eye corner reference points are well separated:

    lip corner 61  -> (288, 336) px
    left cheek 234 -> (192, 264) px
    eye corner 33  -> (243.2, 192) px
"""

import math

import numpy as np
import pytest

from beauty_engine import landmarks as lm

FACE_POINTS = 468


def make_face() -> np.ndarray:
    face = np.full((FACE_POINTS, 3), 0.5, dtype=np.float32)
    face[:, 2] = 0.0

    face[lm.NOSE_TIP, :2] = [0.50, 0.55]
    face[lm.FOREHEAD, :2] = [0.50, 0.20]
    face[lm.CHIN, :2] = [0.50, 0.85]
    face[lm.LEFT_CHEEK, :2] = [0.30, 0.55]
    face[lm.RIGHT_CHEEK, :2] = [0.70, 0.55]
    face[lm.UNDER_LEFT_EYE, :2] = [0.40, 0.45]
    face[lm.UNDER_RIGHT_EYE, :2] = [0.60, 0.45]

    # Lip contour: ellipse around (0.5, 0.70), starting at the left corner
    n = len(lm.LIP_CONTOUR)
    for k, idx in enumerate(lm.LIP_CONTOUR):
        t = 2 * math.pi * k / n
        face[idx, :2] = [0.5 - 0.05 * math.cos(t), 0.70 - 0.03 * math.sin(t)]

    # Eyelid arcs; 33 and 362 are the first points of each arc
    for start, indices in ((0.38, lm.LEFT_EYESHADOW), (0.54, lm.RIGHT_EYESHADOW)):
        for k, idx in enumerate(indices):
            face[idx, :2] = [start + k * 0.012, 0.40 - 0.03 * math.sin(math.pi * k / 7)]

    face[lm.RIGHT_EYE_OUTER, :2] = [0.62, 0.40]
    return face


def make_hand(tip=(0.95, 0.10)) -> np.ndarray:
    """Pointing hand: index extended at ``tip``, other fingers curled."""
    hand = np.zeros((21, 3), dtype=np.float32)
    hand[:, 0] = tip[0]
    hand[:, 1] = 0.95
    hand[lm.INDEX_TIP, :2] = tip
    hand[lm.INDEX_PIP, :2] = [tip[0], tip[1] + 0.05]
    for t, p in lm.FINGER_PAIRS[1:]:
        hand[p, 1] = 0.80
        hand[t, 1] = 0.90
    return hand


def make_open_palm() -> np.ndarray:
    hand = np.zeros((21, 3), dtype=np.float32)
    hand[:, 0] = 0.9
    for t, p in lm.FINGER_PAIRS:
        hand[t, 1] = 0.60
        hand[p, 1] = 0.70
    return hand


def make_fist() -> np.ndarray:
    hand = np.zeros((21, 3), dtype=np.float32)
    hand[:, 0] = 0.9
    hand[:, 1] = 0.85
    for t, p in lm.FINGER_PAIRS[:3]:
        hand[t, 1] = 0.90
        hand[p, 1] = 0.80
    return hand


def point_at(face: np.ndarray, index: int, dx: float = 0.0, dy: float = 0.0) -> np.ndarray:
    x, y = face[index, :2]
    return make_hand((float(x) + dx, float(y) + dy))


@pytest.fixture
def face():
    return make_face()


@pytest.fixture
def gray_frame():
    return np.full((480, 640, 3), 100, dtype=np.uint8)
