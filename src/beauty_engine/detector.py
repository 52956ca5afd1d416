"""Live landmark source using MediaPipe FaceMesh and Hands.

This is the only module that touches a tracking model. The pipelines accept
plain landmark arrays, so tests and replays never need it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

try:
    import mediapipe as mp
except ImportError:
    mp = None


@dataclass
class LandmarkFrame:
    """Landmarks tracked on one frame; ``None`` when nothing was found."""
    face: Optional[np.ndarray]
    hand: Optional[np.ndarray]


def _to_array(landmark_list) -> np.ndarray:
    return np.array(
        [[p.x, p.y, p.z] for p in landmark_list.landmark],
        dtype=np.float32,
    )


class LandmarkSource:
    """Tracks the most confident face (468 points) and hand (21 points).

    Each landmark is (x, y, z) with x/y normalized to [0, 1] relative to
    image dimensions.
    """

    def __init__(
        self,
        track_face: bool = True,
        track_hand: bool = True,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        static_image_mode: bool = False,
    ):
        if mp is None:
            raise ImportError(
                "mediapipe is required for live tracking. Install with: pip install mediapipe"
            )

        self._face_mesh = None
        self._hands = None
        if track_face:
            self._face_mesh = mp.solutions.face_mesh.FaceMesh(
                static_image_mode=static_image_mode,
                max_num_faces=1,
                refine_landmarks=True,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        if track_hand:
            self._hands = mp.solutions.hands.Hands(
                static_image_mode=static_image_mode,
                max_num_hands=1,
                model_complexity=0,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )

    def detect(self, frame_rgb: np.ndarray) -> LandmarkFrame:
        """Run the enabled trackers on an RGB frame (H, W, 3), uint8."""
        face = hand = None

        if self._face_mesh is not None:
            results = self._face_mesh.process(frame_rgb)
            if results.multi_face_landmarks:
                face = _to_array(results.multi_face_landmarks[0])

        if self._hands is not None:
            results = self._hands.process(frame_rgb)
            if results.multi_hand_landmarks:
                hand = _to_array(results.multi_hand_landmarks[0])

        return LandmarkFrame(face=face, hand=hand)

    def close(self):
        """Release MediaPipe resources."""
        if self._face_mesh is not None:
            self._face_mesh.close()
        if self._hands is not None:
            self._hands.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
