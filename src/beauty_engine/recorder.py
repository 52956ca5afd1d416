"""Landmark session recording and replay.

Captures the face and hand landmarks tracked on each frame so try-on
sessions can be replayed through ``TryOnPipeline`` without a camera:
- Reproducible gesture tests
- Headless CI runs
- Debugging a misfiring gesture from a user's recording
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterator, Optional

import numpy as np

logger = logging.getLogger("beauty_engine.recorder")

FORMAT_VERSION = 1


@dataclass
class RecordedFrame:
    """Landmarks seen on one frame; ``None`` where nothing was detected."""
    timestamp: float  # seconds from recording start
    face: Optional[list[list[float]]]
    hand: Optional[list[list[float]]]


def _to_list(points) -> Optional[list[list[float]]]:
    if points is None:
        return None
    arr = np.asarray(points, dtype=np.float32)
    if arr.size == 0:
        return None
    return arr.tolist()


class SessionRecorder:
    """Records per-frame landmark snapshots.

    Usage:
        recorder = SessionRecorder()
        recorder.start()
        # In your frame loop:
        recorder.add_frame(face, hand)
        # When done:
        recorder.save("session.json")
    """

    def __init__(self):
        self._frames: list[RecordedFrame] = []
        self._start_time: Optional[float] = None
        self._recording = False

    def start(self):
        self._frames = []
        self._start_time = time.monotonic()
        self._recording = True

    def stop(self) -> int:
        """Stop recording. Returns number of frames captured."""
        self._recording = False
        return len(self._frames)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        if not self._frames:
            return 0.0
        return self._frames[-1].timestamp

    def add_frame(self, face=None, hand=None, timestamp: Optional[float] = None):
        """Append one frame; ignored unless recording.

        Args:
            face: Face landmarks (N, 2|3) or None.
            hand: Hand landmarks (21, 2|3) or None.
            timestamp: Seconds from start; measured from the monotonic clock
                when omitted.
        """
        if not self._recording:
            return
        if timestamp is None:
            timestamp = time.monotonic() - self._start_time
        self._frames.append(RecordedFrame(
            timestamp=float(timestamp),
            face=_to_list(face),
            hand=_to_list(hand),
        ))

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": FORMAT_VERSION,
            "frame_count": len(self._frames),
            "duration": self.duration,
            "frames": [asdict(f) for f in self._frames],
        }
        with open(path, "w") as f:
            json.dump(data, f)
        logger.info("Saved %d frames (%.1fs) to %s", len(self._frames), self.duration, path)
        return path


class SessionPlayer:
    """Replays a recorded landmark session.

    Usage:
        player = SessionPlayer.load("session.json")
        for frame in player.play():
            pipeline.tick(canvas, frame.face, frame.hand, now=frame.timestamp)
    """

    def __init__(self, frames: list[RecordedFrame]):
        self._frames = frames

    @classmethod
    def load(cls, path: str | Path) -> SessionPlayer:
        with open(path) as f:
            data = json.load(f)

        version = data.get("version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise ValueError(f"unsupported recording version {version} in {path}")

        frames = [
            RecordedFrame(
                timestamp=float(f["timestamp"]),
                face=f.get("face"),
                hand=f.get("hand"),
            )
            for f in data["frames"]
        ]
        return cls(frames)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        if not self._frames:
            return 0.0
        return self._frames[-1].timestamp

    @staticmethod
    def _as_arrays(frame: RecordedFrame) -> RecordedFrame:
        return RecordedFrame(
            timestamp=frame.timestamp,
            face=np.array(frame.face, dtype=np.float32) if frame.face else None,
            hand=np.array(frame.hand, dtype=np.float32) if frame.hand else None,
        )

    def play(self) -> Iterator[RecordedFrame]:
        """Iterate through all frames with landmarks as numpy arrays."""
        for frame in self._frames:
            yield self._as_arrays(frame)

    def get_frame(self, index: int) -> Optional[RecordedFrame]:
        if 0 <= index < len(self._frames):
            return self._as_arrays(self._frames[index])
        return None
