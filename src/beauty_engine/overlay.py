"""Cosmetic overlay compositor.

Paints translucent lipstick, blush and eyeshadow onto an RGB frame from
face landmarks. Regions are drawn lips -> blush -> eyeshadow, each one
alpha-over against whatever is already on the frame.

Usage:
    compositor = OverlayCompositor()
    # In frame loop, on a fresh copy of the camera image:
    compositor.render(frame, face_landmarks, session.overlay)
"""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from beauty_engine import landmarks as lm
from beauty_engine.config import Color, OverlayConfig, scale_factor
from beauty_engine.gestures import OverlayState


def blend_mask(frame: np.ndarray, mask: np.ndarray, color: Color, alpha: float):
    """Alpha-over a flat color onto ``frame`` wherever ``mask`` is set."""
    sel = mask > 0
    if not np.any(sel) or alpha <= 0:
        return
    src = np.asarray(color, dtype=np.float32)
    dst = frame[sel].astype(np.float32)
    frame[sel] = np.clip(np.rint(alpha * src + (1.0 - alpha) * dst), 0, 255).astype(np.uint8)


def blend_alpha_map(frame: np.ndarray, alpha_map: np.ndarray, color: Color, origin: tuple[int, int]):
    """Alpha-over a flat color with per-pixel alpha, placed at ``origin`` (x, y)."""
    x0, y0 = origin
    h, w = alpha_map.shape
    roi = frame[y0:y0 + h, x0:x0 + w]
    sel = alpha_map > 0
    if not np.any(sel):
        return
    a = alpha_map[sel][:, None]
    src = np.asarray(color, dtype=np.float32)
    dst = roi[sel].astype(np.float32)
    roi[sel] = np.clip(np.rint(a * src + (1.0 - a) * dst), 0, 255).astype(np.uint8)


def radial_alpha(
    distance: np.ndarray, alpha: float, inner: float, outer: float
) -> np.ndarray:
    """Gradient alpha: ``alpha`` inside ``inner``, linear fade to 0 at ``outer``."""
    fade = alpha * (outer - distance) / (outer - inner)
    out = np.where(distance <= inner, alpha, fade)
    return np.where(distance < outer, out, 0.0).astype(np.float32)


class OverlayCompositor:
    """Renders the enabled overlay regions; holds no state of its own."""

    def __init__(self, config: Optional[OverlayConfig] = None):
        self.config = config or OverlayConfig()

    def lipstick_color(self, overlay: OverlayState) -> Color:
        palette = self.config.lipstick_palette
        return palette[overlay.color_index % len(palette)]

    def render(self, frame: np.ndarray, face, overlay: OverlayState) -> np.ndarray:
        """Draw enabled regions onto ``frame`` in place and return it.

        Args:
            frame: RGB image (H, W, 3), uint8. Modified in place.
            face: Normalized face landmarks, or None (nothing is drawn).
            overlay: Current overlay flags and color index.
        """
        face = lm.as_landmarks(face)
        if face is None or not overlay.any_active:
            return frame
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise ValueError(f"frame must be (H, W, 3), got {frame.shape}")

        if overlay.lipstick:
            self.draw_lips(frame, face, self.lipstick_color(overlay))
        if overlay.blush:
            self.draw_blush(frame, face)
        if overlay.eyeshadow:
            self.draw_eyeshadow(frame, face)
        return frame

    def draw_lips(self, frame: np.ndarray, face: np.ndarray, color: Color):
        self._fill_polygons(frame, face, [lm.LIP_CONTOUR], color, self.config.lipstick_alpha)

    def draw_eyeshadow(self, frame: np.ndarray, face: np.ndarray):
        c = self.config
        for indices in (lm.LEFT_EYESHADOW, lm.RIGHT_EYESHADOW):
            self._fill_polygons(frame, face, [indices], c.eyeshadow_color, c.eyeshadow_alpha)

    def draw_blush(self, frame: np.ndarray, face: np.ndarray):
        c = self.config
        h, w = frame.shape[:2]
        k = scale_factor(w, h, c.reference_size)
        inner, outer = c.blush_inner_radius * k, c.blush_outer_radius * k

        for index in lm.CHEEKS:
            cx, cy = lm.to_pixel(face, index, w, h)
            x0 = max(int(np.floor(cx - outer)), 0)
            x1 = min(int(np.ceil(cx + outer)) + 1, w)
            y0 = max(int(np.floor(cy - outer)), 0)
            y1 = min(int(np.ceil(cy + outer)) + 1, h)
            if x0 >= x1 or y0 >= y1:
                continue
            ys, xs = np.mgrid[y0:y1, x0:x1]
            dist = np.hypot(xs - cx, ys - cy)
            alpha_map = radial_alpha(dist, c.blush_alpha, inner, outer)
            blend_alpha_map(frame, alpha_map, c.blush_color, (x0, y0))

    def _fill_polygons(self, frame, face, polygons, color: Color, alpha: float):
        h, w = frame.shape[:2]
        mask = np.zeros((h, w), dtype=np.uint8)
        pts = [lm.pixel_polygon(face, indices, w, h) for indices in polygons]
        cv2.fillPoly(mask, pts, 255)
        blend_mask(frame, mask, color, alpha)
