"""Adapters - collaborator protocols and message transports."""

from promptbot.adapters.protocol import MessageTransport, StateStore
from promptbot.adapters.transports import BufferTransport, ConsoleTransport

__all__ = [
    "MessageTransport",
    "StateStore",
    "BufferTransport",
    "ConsoleTransport",
]
