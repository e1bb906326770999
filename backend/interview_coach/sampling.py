"""
Fixed-period gaze sampling. The face detector is an injected port so the
heuristic can be driven by any geometry model (or a fake in tests).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Callable, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from interview_coach.gaze import BoundingBox, GazeReading, classify_gaze

GAZE_SAMPLE_INTERVAL_MS = float(os.getenv("GAZE_SAMPLE_INTERVAL_MS", "500"))
LOG = logging.getLogger("interview.sampling")


class DetectionFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    box: Optional[BoundingBox] = None
    frame_width: float
    frame_height: float


class FaceDetector(Protocol):
    @property
    def ready(self) -> bool: ...

    async def detect(self) -> DetectionFrame: ...


class GazeSampler:
    def __init__(
        self,
        detector: FaceDetector,
        on_sample: Callable[[GazeReading], None],
        interval: float = GAZE_SAMPLE_INTERVAL_MS / 1000,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Sampling interval must be positive, got {interval}")
        self.detector = detector
        self.on_sample = on_sample
        self.interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sample_once(self) -> Optional[GazeReading]:
        """Run a single tick. Returns None when the tick was skipped."""
        if not self.detector.ready:
            return None
        try:
            frame = await self.detector.detect()
            reading = classify_gaze(frame.box, frame.frame_width, frame.frame_height)
        except Exception as exc:
            LOG.warning("Gaze sample failed: %s", exc)
            return None
        self.on_sample(reading)
        return reading

    async def _run(self) -> None:
        while True:
            await self.sample_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
