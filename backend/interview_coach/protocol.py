"""
Per-connection protocol handler: maps inbound events onto the session
aggregator and turns a finished session into a `final_analysis` message.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from interview_coach.gaze import GazeReading, classify_gaze
from interview_coach.models import (
    EyeContactMessage,
    FaceBoxMessage,
    FaceDetectedMessage,
    InterimTranscriptMessage,
    MessageError,
    PingMessage,
    StartMessage,
    StopMessage,
    TranscriptMessage,
    parse_message,
)
from interview_coach.sampling import FaceDetector, GazeSampler
from interview_coach.scoring import analyze_snapshot
from interview_coach.session import SessionAggregator

LOG = logging.getLogger("interview.protocol")

START_STATUS_MESSAGE = "Recording started - Look at the camera and speak naturally!"
NO_SESSION_MESSAGE = "No active session. Send 'start' first."

Sender = Callable[[Dict[str, Any]], Awaitable[None]]


class SessionPhase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class SessionProtocolHandler:
    """Owns one session for the lifetime of one connection."""

    def __init__(
        self,
        send: Sender,
        aggregator: Optional[SessionAggregator] = None,
        detector: Optional[FaceDetector] = None,
    ) -> None:
        self._send = send
        self.aggregator = aggregator or SessionAggregator()
        self.phase = SessionPhase.IDLE
        # Server-side capture is optional; browser clients sample gaze themselves.
        self.sampler = GazeSampler(detector, self._on_sampled_reading) if detector is not None else None

    async def handle_text(self, raw: str) -> None:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            await self._error(f"Payload must be JSON: {exc.msg}")
            return
        if not isinstance(payload, dict):
            await self._error("Payload must be a JSON object")
            return
        await self.handle_payload(payload)

    async def handle_payload(self, payload: Dict[str, Any]) -> None:
        try:
            message = parse_message(payload)
        except MessageError as exc:
            LOG.warning("Rejected inbound message: %s", exc)
            await self._error(str(exc))
            return

        if isinstance(message, StartMessage):
            await self._on_start(message)
        elif isinstance(message, StopMessage):
            await self._on_stop()
        elif isinstance(message, PingMessage):
            await self._send({"type": "pong"})
        elif isinstance(message, InterimTranscriptMessage):
            LOG.debug("Interim transcript (not scored): %s", message.transcript[:50])
        elif self.phase is not SessionPhase.ACTIVE:
            # Capture timers can still fire right after stop.
            LOG.debug("Dropping %s received while idle", message.type)
        elif isinstance(message, TranscriptMessage):
            LOG.info("Transcript received: %s", message.transcript[:50])
            self.aggregator.append_transcript(message.transcript)
        elif isinstance(message, EyeContactMessage):
            LOG.debug("Eye contact: %s%%", message.score)
            self.aggregator.record_gaze(message.score)
        elif isinstance(message, FaceDetectedMessage):
            self.aggregator.increment_face_detections()
        elif isinstance(message, FaceBoxMessage):
            self._on_face_box(message)

    async def _on_start(self, message: StartMessage) -> None:
        self.aggregator.start()
        self.phase = SessionPhase.ACTIVE
        if self.sampler is not None:
            self.sampler.start()
        LOG.info("Recording started")
        ack: Dict[str, Any] = {"type": "status", "message": START_STATUS_MESSAGE}
        if message.question is not None:
            ack["question"] = message.question
        await self._send(ack)

    def _on_sampled_reading(self, reading: GazeReading) -> None:
        if self.phase is not SessionPhase.ACTIVE:
            return
        self.aggregator.record_reading(reading)

    def _on_face_box(self, message: FaceBoxMessage) -> None:
        reading = classify_gaze(message.box, message.frame_width, message.frame_height)
        self.aggregator.record_reading(reading)

    async def _on_stop(self) -> None:
        if self.phase is not SessionPhase.ACTIVE:
            await self._error(NO_SESSION_MESSAGE)
            return
        if self.sampler is not None:
            await self.sampler.stop()
        LOG.info("Recording stopped - analyzing")
        snapshot = self.aggregator.stop()
        self.phase = SessionPhase.IDLE
        try:
            result = analyze_snapshot(snapshot)
        except ValueError as exc:
            LOG.warning("Analysis failed: %s", exc)
            await self._error(f"Analysis failed: {exc}")
            return
        LOG.info("Analysis complete: score=%s", result.score)
        await self._send(
            {
                "type": "final_analysis",
                "transcript": snapshot.transcript.strip(),
                "score": result.score,
                "suggestions": result.suggestions,
                "metrics": result.metrics,
                "analysis": result.summary,
            }
        )

    async def close(self) -> None:
        """Abandon any running session; nothing is scored."""
        if self.sampler is not None:
            await self.sampler.stop()
        self.phase = SessionPhase.IDLE

    async def _error(self, message: str) -> None:
        await self._send({"type": "error", "message": message})
