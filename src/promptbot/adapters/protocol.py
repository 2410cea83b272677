"""
Collaborator protocols.

The bot depends only on these interfaces. Storage and delivery are supplied by
the host: state stores by `promptbot.store`, transports by
`promptbot.adapters.transports` or any object with a matching `send`.
"""

from typing import Callable, Protocol, TypeVar, runtime_checkable

StateT = TypeVar("StateT")


@runtime_checkable
class StateStore(Protocol[StateT]):
    """Loads and saves one kind of state, keyed by conversation or user ID.

    Must provide read-your-writes consistency within a turn.
    """

    async def get(
        self,
        scope_id: str,
        default_factory: Callable[[], StateT] | None = None,
    ) -> StateT:
        """Return stored state, or default_factory() when none is stored."""
        ...

    async def set(self, scope_id: str, state: StateT) -> None:
        """Store state for scope_id, replacing any previous value."""
        ...


@runtime_checkable
class MessageTransport(Protocol):
    """Delivers outbound text to the user.

    Called once per outbound message, in order. No acknowledgment is consumed.
    """

    async def send(self, text: str) -> None:
        ...
