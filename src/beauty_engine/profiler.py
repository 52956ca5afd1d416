"""Per-stage timing for the try-on and skin-analysis pipelines.

Timers are created the first time a stage name is used. The try-on pipeline
times ``gesture`` and ``render``; the skin pipeline times ``sampling``,
``classification`` and ``recommendation``.
"""

from __future__ import annotations

import time
from collections import deque
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np


class StageTimer:
    """Rolling window of durations (ms) for one stage plus a lifetime call count."""

    def __init__(self, window: int):
        self.samples: deque[float] = deque(maxlen=window)
        self.calls = 0

    def add(self, elapsed_ms: float):
        self.samples.append(elapsed_ms)
        self.calls += 1

    def snapshot(self) -> Optional[dict]:
        if not self.samples:
            return None
        ms = np.fromiter(self.samples, dtype=np.float64)
        return {
            "avg_ms": round(float(ms.mean()), 3),
            "min_ms": round(float(ms.min()), 3),
            "max_ms": round(float(ms.max()), 3),
            "p95_ms": round(float(np.percentile(ms, 95)), 3),
            "calls": self.calls,
        }


class PipelineProfiler:
    """Usage:
        profiler = PipelineProfiler()
        with profiler.stage("sampling"):
            regions = sampler.sample_regions(frame, face)
        profiler.summary()  # {"sampling": {"avg_ms": ..., "calls": 1, ...}}
    """

    def __init__(self, window_size: int = 120, enabled: bool = True):
        self.window_size = window_size
        self.enabled = enabled
        self._timers: dict[str, StageTimer] = {}

    def timer(self, name: str) -> StageTimer:
        if name not in self._timers:
            self._timers[name] = StageTimer(self.window_size)
        return self._timers[name]

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return
        started = time.perf_counter()
        try:
            yield
        finally:
            self.timer(name).add((time.perf_counter() - started) * 1000.0)

    def stats(self, name: str) -> Optional[dict]:
        """Snapshot for one stage, or None if it has not run."""
        timer = self._timers.get(name)
        return timer.snapshot() if timer else None

    def summary(self) -> dict[str, dict]:
        return {
            name: snap
            for name, snap in ((n, t.snapshot()) for n, t in self._timers.items())
            if snap is not None
        }

    def reset(self):
        self._timers.clear()
