"""Profile field schema and reply texts."""

from promptbot.prompts.messages import (
    FALLBACK_GREETING,
    GREETING_TOKEN,
    WELCOME_MESSAGE,
    completion_message,
    greeting_message,
    is_greeting,
)
from promptbot.prompts.schema import (
    USER_FIELDS,
    FieldDescriptor,
    empty_fields,
    get_field,
    list_fields,
)

__all__ = [
    "FALLBACK_GREETING",
    "GREETING_TOKEN",
    "WELCOME_MESSAGE",
    "completion_message",
    "greeting_message",
    "is_greeting",
    "USER_FIELDS",
    "FieldDescriptor",
    "empty_fields",
    "get_field",
    "list_fields",
]
