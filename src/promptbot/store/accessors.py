"""State property accessors - typed, scoped views over a Storage backend."""

import json
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from promptbot.contracts.state import TopicState, UserProfile
from promptbot.errors import StateStoreError
from promptbot.store.storage import Storage

CONVERSATION_SCOPE = "conversation"
USER_SCOPE = "user"

TOPIC_STATE_NAME = "PrimitivePrompts.TopicStateAccessor"
USER_PROFILE_NAME = "PrimitivePrompts.UserProfileAccessor"

ModelT = TypeVar("ModelT", bound=BaseModel)


class StatePropertyAccessor(Generic[ModelT]):
    """Reads and writes one named state property within one scope.

    Implements the StateStore protocol: `get(scope_id, default_factory)` and
    `set(scope_id, state)`.
    """

    def __init__(
        self,
        storage: Storage,
        scope: str,
        name: str,
        model: type[ModelT],
    ):
        self.storage = storage
        self.scope = scope
        self.name = name
        self.model = model

    def _key(self, scope_id: str) -> tuple[str, str, str]:
        return (self.scope, scope_id, self.name)

    async def get(
        self,
        scope_id: str,
        default_factory: Callable[[], ModelT] | None = None,
    ) -> ModelT:
        """Load the property, or build it from default_factory when absent."""
        try:
            data = self.storage.read(self._key(scope_id))
        except json.JSONDecodeError as e:
            raise StateStoreError(f"Corrupt {self.name} for {scope_id}: {e}") from e

        if data is None:
            return default_factory() if default_factory else self.model()

        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise StateStoreError(f"Invalid {self.name} for {scope_id}: {e}") from e

    async def set(self, scope_id: str, state: ModelT) -> None:
        self.storage.write(self._key(scope_id), state.model_dump(mode="json"))

    async def delete(self, scope_id: str) -> bool:
        return self.storage.delete(self._key(scope_id))

    def __repr__(self) -> str:
        return f"<StatePropertyAccessor {self.scope}:{self.name}>"


class ConversationState:
    """Accessor factory for conversation-scoped properties."""

    scope = CONVERSATION_SCOPE

    def __init__(self, storage: Storage):
        self.storage = storage

    def create_property(
        self, name: str, model: type[ModelT]
    ) -> StatePropertyAccessor[ModelT]:
        return StatePropertyAccessor(self.storage, self.scope, name, model)

    def clear(self) -> int:
        return self.storage.clear(self.scope)


class UserState(ConversationState):
    """Accessor factory for user-scoped properties."""

    scope = USER_SCOPE


def topic_state_accessor(storage: Storage) -> StatePropertyAccessor[TopicState]:
    return ConversationState(storage).create_property(TOPIC_STATE_NAME, TopicState)


def user_profile_accessor(storage: Storage) -> StatePropertyAccessor[UserProfile]:
    return UserState(storage).create_property(USER_PROFILE_NAME, UserProfile)
