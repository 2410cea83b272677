"""Turn log event definitions."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventKind(str, Enum):
    """All event kinds recorded in the turn log."""

    # Turn lifecycle
    TURN_STARTED = "turn_started"
    TURN_COMPLETED = "turn_completed"

    # Profile collection
    FIELD_CAPTURED = "field_captured"
    FIELD_REJECTED = "field_rejected"
    PROMPT_SENT = "prompt_sent"
    PROFILE_COMPLETED = "profile_completed"

    # Idle conversation
    GREETING_SENT = "greeting_sent"

    # Error
    ERROR = "error"


class TurnEvent(BaseModel):
    """Immutable event envelope.

    Events are ordered by (conversation_id, turn_id, seq); seq increases
    monotonically within a turn.
    """

    conversation_id: str = Field(description="Conversation identifier")
    turn_id: int = Field(ge=1, description="Turn number within the conversation")
    seq: int = Field(ge=0, description="Sequence number within turn")
    ts_monotonic: float = Field(description="time.monotonic() timestamp")
    ts_wall: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Wall clock timestamp",
    )
    kind: EventKind = Field(description="Event type")
    payload: dict[str, Any] = Field(default_factory=dict)
    schema_version: int = Field(default=1)

    model_config = {"frozen": True}


"""
Payload schemas by event kind:

TURN_STARTED:
    text: str
    user_id: str

FIELD_CAPTURED / FIELD_REJECTED:
    field: str

PROMPT_SENT:
    field: str
    welcome: bool

PROFILE_COMPLETED:
    user_name: str | None

GREETING_SENT:
    personal: bool

TURN_COMPLETED:
    total_time_ms: int
    messages: list[str]

ERROR:
    error: str
"""
