"""PromptBot - runs the turn processor against stored state and a transport."""

import logging
import time
from typing import TYPE_CHECKING

from promptbot.adapters.protocol import MessageTransport, StateStore
from promptbot.contracts.activity import Activity, ActivityKind
from promptbot.contracts.events import EventKind, TurnEvent
from promptbot.contracts.state import TopicState, UserProfile
from promptbot.errors import MissingCollaboratorError, PromptBotError
from promptbot.runtime.processor import TurnResult, process_turn
from promptbot.store.accessors import topic_state_accessor, user_profile_accessor
from promptbot.store.storage import MemoryStorage, SqliteStorage, Storage
from promptbot.store.turn_log import TurnLogWriter

if TYPE_CHECKING:
    from promptbot.config import Config

logger = logging.getLogger(__name__)


class PromptBot:
    """Handles one activity at a time.

    Per message: load topic state (conversation scope) and profile (user
    scope), process the turn, send the replies in order, then save both
    states. Turns for one conversation must be serialized by the caller.
    """

    def __init__(
        self,
        topic_state: StateStore[TopicState],
        user_profile: StateStore[UserProfile],
        transport: MessageTransport,
        turn_log: TurnLogWriter | None = None,
    ):
        if topic_state is None:
            raise MissingCollaboratorError("topic_state")
        if user_profile is None:
            raise MissingCollaboratorError("user_profile")
        if transport is None:
            raise MissingCollaboratorError("transport")

        self.topic_state = topic_state
        self.user_profile = user_profile
        self.transport = transport
        self.turn_log = turn_log

    @classmethod
    def from_config(
        cls,
        config: "Config",
        transport: MessageTransport,
        storage: Storage | None = None,
        turn_log: bool | None = None,
    ) -> "PromptBot":
        """Build a bot whose state and turn log live where config says.

        turn_log overrides TURN_LOG_ENABLED when given.
        """
        if storage is None:
            storage = open_storage(config)
        if turn_log is None:
            turn_log = config.TURN_LOG_ENABLED
        return cls(
            topic_state_accessor(storage),
            user_profile_accessor(storage),
            transport,
            turn_log=TurnLogWriter(config.state_db_path) if turn_log else None,
        )

    async def on_turn(self, activity: Activity) -> TurnResult | None:
        """Process one activity. Non-message activities are ignored.

        Returns:
            The turn result, or None when the activity was not a message

        Raises:
            UnknownFieldError: if stored topic state names an unknown field
            StateStoreError: if stored state cannot be decoded

            Nothing is sent or saved for a failed turn.
        """
        if activity.kind is not ActivityKind.MESSAGE:
            logger.debug(
                f"Ignoring {activity.kind.value} activity in {activity.conversation_id}"
            )
            return None

        conversation_id = activity.conversation_id
        text = activity.text or ""
        started = time.monotonic()
        turn_id = self._next_turn_id(conversation_id)

        self._emit(
            conversation_id,
            turn_id,
            EventKind.TURN_STARTED,
            {"text": text, "user_id": activity.user_id},
        )

        try:
            topic_state = await self.topic_state.get(conversation_id, TopicState.new)
            profile = await self.user_profile.get(activity.user_id, UserProfile)
            result = process_turn(topic_state, profile, text)
        except PromptBotError as e:
            logger.error(f"Turn {turn_id} in {conversation_id} failed: {e}")
            self._emit(conversation_id, turn_id, EventKind.ERROR, {"error": str(e)})
            self._end_turn(conversation_id, turn_id)
            raise

        for message in result.messages:
            await self.transport.send(message)

        await self.topic_state.set(conversation_id, result.topic_state)
        await self.user_profile.set(activity.user_id, result.profile)

        self._record_outcome(conversation_id, turn_id, result)
        self._emit(
            conversation_id,
            turn_id,
            EventKind.TURN_COMPLETED,
            {
                "total_time_ms": int((time.monotonic() - started) * 1000),
                "messages": list(result.messages),
            },
        )
        self._end_turn(conversation_id, turn_id)
        return result

    def _next_turn_id(self, conversation_id: str) -> int:
        """Turn IDs continue from the turn log; without one every turn is 1."""
        if self.turn_log is None:
            return 1
        return self.turn_log.get_last_turn_id(conversation_id) + 1

    def _end_turn(self, conversation_id: str, turn_id: int) -> None:
        if self.turn_log is not None:
            self.turn_log.end_turn(conversation_id, turn_id)

    def _record_outcome(
        self, conversation_id: str, turn_id: int, result: TurnResult
    ) -> None:
        if result.captured:
            self._emit(
                conversation_id, turn_id, EventKind.FIELD_CAPTURED, {"field": result.captured}
            )
        if result.rejected:
            self._emit(
                conversation_id, turn_id, EventKind.FIELD_REJECTED, {"field": result.rejected}
            )
        if result.prompted:
            self._emit(
                conversation_id,
                turn_id,
                EventKind.PROMPT_SENT,
                {"field": result.prompted, "welcome": result.welcomed},
            )
        elif result.completed:
            logger.info(f"Profile complete in conversation {conversation_id}")
            self._emit(
                conversation_id,
                turn_id,
                EventKind.PROFILE_COMPLETED,
                {"user_name": result.profile.user_name},
            )
        elif result.greeted is not None:
            self._emit(
                conversation_id,
                turn_id,
                EventKind.GREETING_SENT,
                {"personal": result.greeted},
            )

    def _emit(
        self,
        conversation_id: str,
        turn_id: int,
        kind: EventKind,
        payload: dict,
    ) -> TurnEvent | None:
        """Create and persist a turn log event, if a turn log is attached."""
        if self.turn_log is None:
            return None
        event = TurnEvent(
            conversation_id=conversation_id,
            turn_id=turn_id,
            seq=self.turn_log.next_seq(conversation_id, turn_id),
            ts_monotonic=time.monotonic(),
            kind=kind,
            payload=payload,
        )
        self.turn_log.append(event)
        return event


def open_storage(config: "Config", backend: str | None = None) -> Storage:
    """Create the storage backend named by config (or by backend, if given)."""
    backend = backend or config.STORAGE_BACKEND
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SqliteStorage(config.state_db_path)
    raise ValueError(f"Unknown storage backend: {backend}")
