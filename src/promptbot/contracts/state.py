"""State contracts - the records persisted between turns."""

from pydantic import BaseModel, Field

PROFILE_TOPIC = "profile"


class TopicState(BaseModel):
    """Conversation-scoped flow state.

    `prompt` names the field whose prompt was just sent, i.e. the field the
    next message answers. It is either None or a key of the field schema.
    """

    topic: str | None = Field(default=None, description="Active flow, None when idle")
    prompt: str | None = Field(default=None, description="Pending field key")

    model_config = {"frozen": True}

    @classmethod
    def new(cls) -> "TopicState":
        """State for a conversation seen for the first time."""
        return cls(topic=PROFILE_TOPIC, prompt=None)

    @property
    def collecting(self) -> bool:
        return self.topic == PROFILE_TOPIC


class UserProfile(BaseModel):
    """User-scoped profile, one optional slot per schema field."""

    user_name: str | None = None
    age: int | None = None
    work_place: str | None = None

    model_config = {"frozen": True}
