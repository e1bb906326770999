"""Geometric gaze-quality heuristic: how centered is the face in the frame."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Tolerance as a fraction of the frame size on each axis.
CENTER_TOLERANCE = 0.15

# (multiple of tolerance, score), tightest band first.
GAZE_BANDS = (
    (0.5, 90),
    (1.0, 75),
    (1.5, 60),
)
OFF_CENTER_SCORE = 40
NO_FACE_SCORE = 0


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


class GazeReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    face_detected: bool


def classify_gaze(box: Optional[BoundingBox], frame_width: float, frame_height: float) -> GazeReading:
    if frame_width <= 0 or frame_height <= 0:
        raise ValueError(f"Frame size must be positive, got {frame_width}x{frame_height}")
    if box is None:
        return GazeReading(score=NO_FACE_SCORE, face_detected=False)

    face_x, face_y = box.center
    dx = abs(face_x - frame_width / 2)
    dy = abs(face_y - frame_height / 2)
    tx = CENTER_TOLERANCE * frame_width
    ty = CENTER_TOLERANCE * frame_height

    score = OFF_CENTER_SCORE
    for factor, band_score in GAZE_BANDS:
        if dx < factor * tx and dy < factor * ty:
            score = band_score
            break
    return GazeReading(score=max(0, min(100, score)), face_detected=True)
