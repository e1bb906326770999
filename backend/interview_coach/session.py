from __future__ import annotations

import logging
import math
import time
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict

from interview_coach.gaze import GazeReading

LOG = logging.getLogger("interview.session")


class SessionNotStartedError(RuntimeError):
    """Raised when a session is finalized before it was ever started."""


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    transcript: str
    duration: float  # seconds
    avg_gaze_score: int
    face_detection_count: int


class SessionAggregator:
    """Per-connection session state. Knows nothing about scoring."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.transcript = ""
        self.gaze_scores: List[int] = []
        self.face_detection_count = 0
        self.started_at: Optional[float] = None  # monotonic seconds
        self.stopped = False

    @property
    def active(self) -> bool:
        return self.started_at is not None and not self.stopped

    def start(self) -> None:
        self.transcript = ""
        self.gaze_scores = []
        self.face_detection_count = 0
        self.started_at = self._clock()
        self.stopped = False

    def append_transcript(self, fragment: str) -> None:
        self.transcript += " " + fragment

    def record_gaze(self, score: int) -> None:
        self.gaze_scores.append(score)

    def increment_face_detections(self) -> None:
        self.face_detection_count += 1

    def record_reading(self, reading: GazeReading) -> None:
        if reading.face_detected:
            self.increment_face_detections()
        self.record_gaze(reading.score)

    def stop(self) -> SessionSnapshot:
        if self.started_at is None:
            raise SessionNotStartedError("Session was never started")
        duration = self._clock() - self.started_at
        if self.gaze_scores:
            avg_gaze = round_half_up(sum(self.gaze_scores) / len(self.gaze_scores))
        else:
            avg_gaze = 0
        self.stopped = True
        LOG.info(
            "Session stopped after %.1fs (%d gaze samples, %d face detections)",
            duration,
            len(self.gaze_scores),
            self.face_detection_count,
        )
        return SessionSnapshot(
            transcript=self.transcript,
            duration=duration,
            avg_gaze_score=avg_gaze,
            face_detection_count=self.face_detection_count,
        )
