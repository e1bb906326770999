"""
FastAPI backend for the interview coach.
Exposes a WebSocket endpoint for live session capture plus service info and health checks.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Dict, List

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from interview_coach.protocol import SessionProtocolHandler

SERVICE_VERSION = "4.0.0"
SERVICE_FEATURES: List[str] = [
    "live_transcription",
    "eye_contact_detection",
    "filler_words",
    "speaking_pace",
]
COACH_LOG_LEVEL = os.getenv("COACH_LOG_LEVEL", "INFO").upper()
COACH_CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("COACH_CORS_ORIGINS", "*").split(",") if origin.strip()
]
logging.basicConfig(level=COACH_LOG_LEVEL)
LOG = logging.getLogger("interview")

app = FastAPI(title="Interview Coach", version=SERVICE_VERSION)

# CORS for local dev; narrow COACH_CORS_ORIGINS for prod.
app.add_middleware(
    CORSMiddleware,
    allow_origins=COACH_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def service_info() -> Dict[str, Any]:
    return {
        "message": "Interview Coach Server",
        "features": SERVICE_FEATURES,
        "version": SERVICE_VERSION,
    }


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok", "version": SERVICE_VERSION}


@app.websocket("/ws/interview")
async def interview_socket(ws: WebSocket) -> None:
    await ws.accept()
    # Deployments with a server-side camera set app.state.face_detector_factory.
    detector_factory = getattr(ws.app.state, "face_detector_factory", None)
    detector = detector_factory() if detector_factory is not None else None
    handler = SessionProtocolHandler(ws.send_json, detector=detector)
    LOG.info("Client connected")

    try:
        while True:
            raw = await ws.receive_text()
            try:
                await handler.handle_text(raw)
            except WebSocketDisconnect:
                raise
            except Exception as exc:
                # One bad message never tears down the session.
                LOG.exception("Failed to handle message: %s", exc)
                await ws.send_json({"type": "error", "message": str(exc)})
            await asyncio.sleep(0)  # yield control
    except WebSocketDisconnect:
        LOG.info("Client disconnected")
    finally:
        await handler.close()
