"""promptbot store - state storage, accessors and the turn log."""

from promptbot.store.accessors import (
    CONVERSATION_SCOPE,
    TOPIC_STATE_NAME,
    USER_PROFILE_NAME,
    USER_SCOPE,
    ConversationState,
    StatePropertyAccessor,
    UserState,
    topic_state_accessor,
    user_profile_accessor,
)
from promptbot.store.storage import MemoryStorage, SqliteStorage, Storage
from promptbot.store.turn_log import TurnLogWriter

__all__ = [
    "CONVERSATION_SCOPE",
    "TOPIC_STATE_NAME",
    "USER_PROFILE_NAME",
    "USER_SCOPE",
    "ConversationState",
    "StatePropertyAccessor",
    "UserState",
    "topic_state_accessor",
    "user_profile_accessor",
    "MemoryStorage",
    "SqliteStorage",
    "Storage",
    "TurnLogWriter",
]
