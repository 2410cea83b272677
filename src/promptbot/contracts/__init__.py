"""promptbot contracts - typed schemas for state, activities and events."""

from promptbot.contracts.activity import Activity, ActivityKind
from promptbot.contracts.events import EventKind, TurnEvent
from promptbot.contracts.state import PROFILE_TOPIC, TopicState, UserProfile

__all__ = [
    "Activity",
    "ActivityKind",
    "EventKind",
    "TurnEvent",
    "PROFILE_TOPIC",
    "TopicState",
    "UserProfile",
]
