"""Incoming activity contract."""

from enum import Enum

from pydantic import BaseModel, Field


class ActivityKind(str, Enum):
    """Kinds of activity a channel can deliver."""

    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    TYPING = "typing"
    END_OF_CONVERSATION = "endOfConversation"


class Activity(BaseModel):
    """One inbound activity, as handed to the bot by the turn source."""

    kind: ActivityKind = ActivityKind.MESSAGE
    text: str | None = None
    conversation_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)

    model_config = {"frozen": True}

    @classmethod
    def message(cls, text: str, conversation_id: str, user_id: str) -> "Activity":
        return cls(
            kind=ActivityKind.MESSAGE,
            text=text,
            conversation_id=conversation_id,
            user_id=user_id,
        )
