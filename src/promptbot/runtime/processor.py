"""Turn processor - the profile-collection state machine.

A pure function of (topic state, profile, message text). It never performs
I/O: the caller loads state before the turn and persists the returned state
and sends the returned messages afterwards.
"""

from dataclasses import dataclass, field

from promptbot.contracts.state import TopicState, UserProfile
from promptbot.prompts import messages
from promptbot.prompts.schema import empty_fields, get_field, list_fields


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one turn."""

    topic_state: TopicState
    profile: UserProfile
    messages: list[str] = field(default_factory=list)
    captured: str | None = None  # key of the field the message filled
    rejected: str | None = None  # key of the field whose input was discarded
    prompted: str | None = None  # key of the field asked for next
    welcomed: bool = False
    completed: bool = False
    greeted: bool | None = None  # True personal greeting, False fallback


def process_turn(
    topic_state: TopicState,
    profile: UserProfile,
    text: str,
) -> TurnResult:
    """Process one message turn.

    1. If a field prompt is pending, record the message as its answer.
    2. While collecting, ask for the first empty field, or finish the profile.
    3. Once collection is over, answer greetings.

    Raises:
        UnknownFieldError: if the pending prompt names no schema field
    """
    text = (text or "").strip()
    captured = rejected = None

    # Capture the answer to the prompt sent last turn
    if topic_state.collecting and topic_state.prompt is not None:
        pending = get_field(topic_state.prompt)
        profile = pending.set_value(profile, text)
        if pending.is_set(profile):
            captured = pending.key
        else:
            rejected = pending.key

    if not topic_state.collecting:
        greeted = messages.is_greeting(text)
        if greeted:
            reply = messages.greeting_message(profile.user_name)
        else:
            reply = messages.FALLBACK_GREETING
        return TurnResult(
            topic_state=topic_state,
            profile=profile,
            messages=[reply],
            greeted=greeted,
        )

    missing = empty_fields(profile)

    if not missing:
        return TurnResult(
            topic_state=TopicState(topic=None, prompt=None),
            profile=profile,
            messages=[messages.completion_message(profile.user_name)],
            captured=captured,
            completed=True,
        )

    replies = []
    welcomed = len(missing) == len(list_fields())
    if welcomed:
        replies.append(messages.WELCOME_MESSAGE)

    next_field = missing[0]
    replies.append(next_field.prompt)

    return TurnResult(
        topic_state=topic_state.model_copy(update={"prompt": next_field.key}),
        profile=profile,
        messages=replies,
        captured=captured,
        rejected=rejected,
        prompted=next_field.key,
        welcomed=welcomed,
    )
