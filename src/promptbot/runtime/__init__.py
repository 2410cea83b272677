"""promptbot runtime - turn processing."""

from promptbot.runtime.bot import PromptBot, open_storage
from promptbot.runtime.processor import TurnResult, process_turn

__all__ = [
    "PromptBot",
    "open_storage",
    "TurnResult",
    "process_turn",
]
