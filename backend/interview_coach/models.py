from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from interview_coach.gaze import BoundingBox


class StartMessage(BaseModel):
    type: Literal["start"]
    question: Optional[str] = None  # opaque, echoed back in the ack


class TranscriptMessage(BaseModel):
    type: Literal["transcript"]
    transcript: str


class InterimTranscriptMessage(BaseModel):
    type: Literal["interim_transcript"]
    transcript: str


class EyeContactMessage(BaseModel):
    type: Literal["eye_contact"]
    score: int = Field(ge=0, le=100)


class FaceDetectedMessage(BaseModel):
    type: Literal["face_detected"]


class FaceBoxMessage(BaseModel):
    type: Literal["face_box"]
    box: Optional[BoundingBox] = None
    frame_width: float = Field(alias="frameWidth", gt=0)
    frame_height: float = Field(alias="frameHeight", gt=0)


class PingMessage(BaseModel):
    type: Literal["ping"]


class StopMessage(BaseModel):
    type: Literal["stop"]


InboundMessage = Annotated[
    Union[
        StartMessage,
        TranscriptMessage,
        InterimTranscriptMessage,
        EyeContactMessage,
        FaceDetectedMessage,
        FaceBoxMessage,
        PingMessage,
        StopMessage,
    ],
    Field(discriminator="type"),
]

INBOUND_ADAPTER: TypeAdapter[Any] = TypeAdapter(InboundMessage)

MESSAGE_TYPES = frozenset(
    {
        "start",
        "transcript",
        "interim_transcript",
        "eye_contact",
        "face_detected",
        "face_box",
        "ping",
        "stop",
    }
)


class MessageError(ValueError):
    """Inbound payload could not be turned into a protocol message."""


def describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        # Drop the discriminator tag pydantic prepends to every location.
        loc = [str(part) for part in err.get("loc", ())][1:]
        field = ".".join(loc) or "payload"
        parts.append(f"{field}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_message(payload: Dict[str, Any]) -> Any:
    msg_type = payload.get("type")
    if not isinstance(msg_type, str):
        raise MessageError("Message type must be a string.")
    if msg_type not in MESSAGE_TYPES:
        raise MessageError(f"Unrecognized message type: {msg_type}")
    try:
        return INBOUND_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise MessageError(f"Invalid '{msg_type}' message: {describe_validation_error(exc)}") from exc
