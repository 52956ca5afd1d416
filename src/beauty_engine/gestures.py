"""Pointing-gesture state machine that toggles cosmetic overlays.

One hand and one face per tick. Gestures are evaluated in priority order
and the first match wins:

1. Open palm (index/middle/ring/pinky tips above their knuckles) -> clear
   all overlays.
2. Index fingertip near a facial reference point -> enable lipstick
   (lip corner), blush (cheek) or eyeshadow (eye corner), checked in that
   order.
3. Fist (index/middle/ring tips below their knuckles) -> next lipstick color.

Any match arms a single cooldown deadline; until it passes every gesture is
ignored, so a held pose fires once. Time is injected as ``now`` so sessions
replay deterministically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np

from beauty_engine import landmarks as lm
from beauty_engine.config import GestureConfig, scale_factor

logger = logging.getLogger("beauty_engine.gestures")

RESET_HINT = " • ✋ reset"
IDLE_HINT = "point to lips/cheeks/eyes • ✋ to reset"

FEEDBACK_TEXT = {
    "reset": "Reset ✋ cleared all makeup",
    "lipstick": "Lipstick on 💄 (pointed to lips)",
    "blush": "Blush on 🍑 (pointed to cheek)",
    "eyeshadow": "Eyeshadow on 👁️ (pointed to eye)",
    "color": "Lipstick color changed",
}


@dataclass(frozen=True)
class OverlayState:
    """Which overlays are on, and the current lipstick palette index."""
    lipstick: bool = False
    blush: bool = False
    eyeshadow: bool = False
    color_index: int = 0

    def active_regions(self) -> list[str]:
        names = []
        if self.lipstick:
            names.append("Lipstick")
        if self.blush:
            names.append("Blush")
        if self.eyeshadow:
            names.append("Eyeshadow")
        return names

    @property
    def any_active(self) -> bool:
        return self.lipstick or self.blush or self.eyeshadow


@dataclass(frozen=True)
class FeedbackEvent:
    """Transient confirmation shown by the status line until ``expires_at``."""
    kind: str
    text: str
    expires_at: float


@dataclass(frozen=True)
class SessionState:
    """Everything carried from one tick to the next."""
    overlay: OverlayState = field(default_factory=OverlayState)
    cooldown_until: float = 0.0
    feedback: Optional[FeedbackEvent] = None

    def locked(self, now: float) -> bool:
        return now < self.cooldown_until

    @classmethod
    def reset(cls) -> SessionState:
        return cls()


def is_open_palm(hand: np.ndarray) -> bool:
    """All four non-thumb fingertips are higher on screen than their knuckles."""
    return all(hand[tip][1] < hand[pip][1] for tip, pip in lm.FINGER_PAIRS)


def is_fist(hand: np.ndarray) -> bool:
    """Index, middle and ring fingertips are curled below their knuckles."""
    return all(hand[tip][1] > hand[pip][1] for tip, pip in lm.FINGER_PAIRS[:3])


def status_text(session: SessionState, now: float) -> str:
    """Status line: live feedback if not yet expired, else an idle summary."""
    fb = session.feedback
    if fb is not None and now < fb.expires_at:
        return fb.text + RESET_HINT
    regions = session.overlay.active_regions()
    if regions:
        return "ON: " + ", ".join(regions)
    return IDLE_HINT


class GestureRecognizer:
    """Maps hand + face landmarks to overlay state changes."""

    def __init__(self, config: Optional[GestureConfig] = None, palette_size: int = 3):
        if palette_size < 1:
            raise ValueError("palette_size must be at least 1")
        self.config = config or GestureConfig()
        self.palette_size = palette_size

    def radii(self, frame_size: Optional[tuple[int, int]] = None) -> tuple[float, float, float]:
        """(lip, cheek, eye) activation radii in pixels for ``frame_size``."""
        c = self.config
        k = 1.0
        if frame_size is not None:
            k = scale_factor(frame_size[0], frame_size[1], c.reference_size)
        return c.lip_radius * k, c.cheek_radius * k, c.eye_radius * k

    def process(
        self,
        hand,
        face,
        session: SessionState,
        now: float,
        frame_size: Optional[tuple[int, int]] = None,
    ) -> tuple[SessionState, Optional[FeedbackEvent]]:
        """Evaluate one tick.

        Args:
            hand: Normalized hand landmarks (21 points) or None.
            face: Normalized face landmarks or None.
            session: State from the previous tick.
            now: Current time in seconds (monotonic).
            frame_size: (width, height) of the raster; defaults to the
                reference canvas.

        Returns:
            (new_session, event). The session is returned unchanged when
            nothing fires.
        """
        hand = lm.as_landmarks(hand)
        face = lm.as_landmarks(face)
        if hand is None or face is None:
            return session, None
        if session.locked(now):
            return session, None
        if len(hand) < lm.HAND_LANDMARK_COUNT:
            raise ValueError(
                f"hand landmarks need {lm.HAND_LANDMARK_COUNT} points, got {len(hand)}"
            )

        width, height = frame_size or self.config.reference_size
        overlay = session.overlay
        kind: Optional[str] = None

        if is_open_palm(hand):
            overlay = OverlayState(color_index=overlay.color_index)
            kind = "reset"
        else:
            kind, overlay = self._match_region(hand, face, overlay, width, height)

        if kind is None and is_fist(hand):
            new_overlay = replace(
                overlay, color_index=(overlay.color_index + 1) % self.palette_size
            )
            logger.debug("Lipstick color %d -> %d", overlay.color_index, new_overlay.color_index)
            cooled = replace(
                session,
                overlay=new_overlay,
                cooldown_until=now + self.config.cooldown_seconds,
            )
            if not overlay.lipstick:
                return cooled, None
            event = self._event("color", now)
            return replace(cooled, feedback=event), event

        if kind is None:
            return session, None

        logger.debug("Gesture %s fired at %.3f", kind, now)
        event = self._event(kind, now)
        return SessionState(
            overlay=overlay,
            cooldown_until=now + self.config.cooldown_seconds,
            feedback=event,
        ), event

    def _match_region(
        self, hand: np.ndarray, face: np.ndarray, overlay: OverlayState,
        width: int, height: int,
    ) -> tuple[Optional[str], OverlayState]:
        tip = lm.to_pixel(hand, lm.INDEX_TIP, width, height)
        lip_r, cheek_r, eye_r = self.radii((width, height))

        checks = [
            ("lipstick", lm.LIP_CORNER, lip_r),
            ("blush", lm.LEFT_CHEEK, cheek_r),
            ("eyeshadow", lm.LEFT_EYE_OUTER, eye_r),
        ]
        for kind, index, radius in checks:
            ref = lm.to_pixel(face, index, width, height)
            if lm.pixel_distance(tip, ref) < radius:
                return kind, replace(overlay, **{kind: True})
        return None, overlay

    def _event(self, kind: str, now: float) -> FeedbackEvent:
        return FeedbackEvent(
            kind=kind,
            text=FEEDBACK_TEXT[kind],
            expires_at=now + self.config.feedback_seconds,
        )
