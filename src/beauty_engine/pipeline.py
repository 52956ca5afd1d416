"""Per-frame tick functions for the try-on and skin-analysis pipelines.

Both pipelines are driven by an external loop that hands in one frame and
the landmarks tracked on it. Nothing here blocks, schedules timers or keeps
landmarks between ticks; the only carried state is the try-on
``SessionState`` (overlay flags, color index, cooldown deadline).

Usage:
    tryon = TryOnPipeline()
    skin = SkinAnalysisPipeline()
    # In frame loop:
    result = tryon.tick(frame_rgb, face, hand)
    show(result.frame, result.status)
    report = skin.tick(frame_rgb, face).report
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from beauty_engine import landmarks as lm
from beauty_engine.config import EngineConfig
from beauty_engine.gestures import (
    FeedbackEvent,
    GestureRecognizer,
    SessionState,
    status_text,
)
from beauty_engine.overlay import OverlayCompositor
from beauty_engine.profiler import PipelineProfiler
from beauty_engine.recommendations import RecommendationEngine
from beauty_engine.report import SkinReport, build_report
from beauty_engine.sampler import RegionSampler
from beauty_engine.skin import SkinClassifier

logger = logging.getLogger("beauty_engine.pipeline")

FACE_NOT_DETECTED = "Face not detected. Please face the camera in good light."
ANALYSIS_READY = "Analysis complete."


@dataclass
class TryOnResult:
    frame: np.ndarray
    status: str
    feedback: Optional[FeedbackEvent]
    session: SessionState


@dataclass
class SkinAnalysisResult:
    status: str
    report: Optional[SkinReport]


@dataclass
class PipelineStats:
    """Runtime statistics for one pipeline."""
    fps: float
    avg_latency_ms: float
    total_frames: int
    total_events: int
    profiler_summary: dict = field(default_factory=dict)


class _TimedPipeline:
    def __init__(self, enable_profiling: bool = True):
        self.profiler = PipelineProfiler(enabled=enable_profiling)
        self._frame_times: deque = deque(maxlen=60)
        self._total_frames = 0
        self._total_events = 0

    def _record_frame(self, started: float):
        self._frame_times.append(time.perf_counter() - started)
        self._total_frames += 1

    @property
    def stats(self) -> PipelineStats:
        if self._frame_times:
            avg_latency = sum(self._frame_times) / len(self._frame_times)
            fps = 1.0 / avg_latency if avg_latency > 0 else 0.0
        else:
            avg_latency = 0.0
            fps = 0.0
        return PipelineStats(
            fps=fps,
            avg_latency_ms=avg_latency * 1000,
            total_frames=self._total_frames,
            total_events=self._total_events,
            profiler_summary=self.profiler.summary(),
        )


class TryOnPipeline(_TimedPipeline):
    """Gesture recognition followed by overlay rendering, once per frame."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        session: Optional[SessionState] = None,
        enable_profiling: bool = True,
    ):
        super().__init__(enable_profiling)
        self.config = config or EngineConfig()
        self.recognizer = GestureRecognizer(
            self.config.gesture,
            palette_size=len(self.config.overlay.lipstick_palette),
        )
        self.compositor = OverlayCompositor(self.config.overlay)
        self._session = session or SessionState()

    @property
    def session(self) -> SessionState:
        return self._session

    @session.setter
    def session(self, value: SessionState):
        self._session = value

    def reset(self):
        """Start a new session: all overlays off, color index 0."""
        self._session = SessionState.reset()

    def tick(
        self,
        frame: np.ndarray,
        face=None,
        hand=None,
        now: Optional[float] = None,
    ) -> TryOnResult:
        """Process one frame.

        The camera ``frame`` is left untouched; overlays are drawn on a copy
        which is returned in the result.
        """
        started = time.perf_counter()
        now = time.monotonic() if now is None else now
        face = lm.as_landmarks(face)
        hand = lm.as_landmarks(hand)
        h, w = frame.shape[:2]

        with self.profiler.stage("gesture"):
            session, event = self.recognizer.process(
                hand, face, self._session, now, frame_size=(w, h)
            )
        self._session = session
        if event is not None:
            self._total_events += 1
            logger.debug("Feedback: %s", event.text)

        out = frame.copy()
        with self.profiler.stage("render"):
            self.compositor.render(out, face, session.overlay)

        self._record_frame(started)
        return TryOnResult(
            frame=out,
            status=status_text(session, now),
            feedback=event,
            session=session,
        )


class SkinAnalysisPipeline(_TimedPipeline):
    """Region sampling, classification and recommendations, once per frame."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        recommender: Optional[RecommendationEngine] = None,
        enable_profiling: bool = True,
    ):
        super().__init__(enable_profiling)
        self.config = config or EngineConfig()
        self.sampler = RegionSampler(self.config.sampling)
        self.classifier = SkinClassifier(self.config.skin)
        self.recommender = recommender or RecommendationEngine()
        self.latest_report: Optional[SkinReport] = None

    def analyze(self, frame: np.ndarray, face) -> SkinReport:
        """Build a report for one frame with a detected face."""
        with self.profiler.stage("sampling"):
            regions = self.sampler.sample_regions(frame, face)
        with self.profiler.stage("classification"):
            profile = self.classifier.classify(regions)
        with self.profiler.stage("recommendation"):
            recs = self.recommender.recommend(profile)
        return build_report(regions, profile, recs)

    def tick(self, frame: np.ndarray, face=None) -> SkinAnalysisResult:
        """Analyse one frame; without a face only a status message is produced."""
        started = time.perf_counter()
        face = lm.as_landmarks(face)
        if face is None:
            self._record_frame(started)
            return SkinAnalysisResult(status=FACE_NOT_DETECTED, report=None)

        report = self.analyze(frame, face)
        self.latest_report = report
        self._total_events += 1
        logger.debug(
            "Skin report: %s (redness=%s, dark_circles=%s, texture_uneven=%s)",
            report.skin_type,
            report.observations["redness"],
            report.observations["dark_circles"],
            report.observations["texture_uneven"],
        )
        self._record_frame(started)
        return SkinAnalysisResult(status=ANALYSIS_READY, report=report)
