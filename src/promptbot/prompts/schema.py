"""Profile field schema.

The ordered, fixed set of fields the bot asks for. Order is the prompt
sequence: earlier fields are always asked before later ones.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from promptbot.contracts.state import UserProfile
from promptbot.errors import UnknownFieldError

logger = logging.getLogger(__name__)

# Integer values must fit a signed 32-bit slot
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_text(value: str) -> str:
    return value


def parse_int(value: str) -> int | None:
    """Parse a base-10 integer, returning None when the text is not one."""
    if not _INT_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if not INT_MIN <= number <= INT_MAX:
        return None
    return number


@dataclass(frozen=True)
class FieldDescriptor:
    """One profile field: its key, prompt, and how it maps onto UserProfile."""

    key: str
    prompt: str
    attribute: str
    parse: Callable[[str], Any] = parse_text

    def get_value(self, profile: UserProfile) -> str | None:
        """Current value rendered as text, or None when unset."""
        value = getattr(profile, self.attribute)
        if value is None or value == "":
            return None
        return str(value)

    def is_set(self, profile: UserProfile) -> bool:
        return self.get_value(profile) is not None

    def set_value(self, profile: UserProfile, text: str) -> UserProfile:
        """Return a copy of the profile with this field set from text.

        Text that cannot be coerced is discarded and the profile is returned
        unchanged.
        """
        value = self.parse(text)
        if value is None:
            logger.debug(f"Discarded unparsable value for {self.key}: {text!r}")
            return profile
        return profile.model_copy(update={self.attribute: value})


USER_FIELDS: tuple[FieldDescriptor, ...] = (
    FieldDescriptor(
        key="UserName",
        prompt="What is your name?",
        attribute="user_name",
    ),
    FieldDescriptor(
        key="Age",
        prompt="How old are you?",
        attribute="age",
        parse=parse_int,
    ),
    FieldDescriptor(
        key="WorkPlace",
        prompt="Where do you work?",
        attribute="work_place",
    ),
)

_FIELDS_BY_KEY = {field.key: field for field in USER_FIELDS}


def list_fields() -> tuple[FieldDescriptor, ...]:
    """The ordered field schema."""
    return USER_FIELDS


def get_field(key: str) -> FieldDescriptor:
    """Look up a field by key.

    Raises:
        UnknownFieldError: if no field has this key
    """
    try:
        return _FIELDS_BY_KEY[key]
    except KeyError:
        raise UnknownFieldError(key) from None


def empty_fields(profile: UserProfile) -> list[FieldDescriptor]:
    """Fields not yet set on the profile, in schema order."""
    return [field for field in USER_FIELDS if not field.is_set(profile)]
