"""Message transports."""

from rich.console import Console
from rich.text import Text


class BufferTransport:
    """Collects outbound messages in memory.

    Useful for hosts that reply in a single response body, and for tests.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, text: str) -> None:
        self.sent.append(text)

    def drain(self) -> list[str]:
        """Return and forget everything sent so far."""
        sent, self.sent = self.sent, []
        return sent


class ConsoleTransport:
    """Prints bot replies to a rich console."""

    def __init__(self, console: Console | None = None, prefix: str = "bot"):
        self.console = console or Console()
        self.prefix = prefix

    async def send(self, text: str) -> None:
        line = Text()
        line.append(f"{self.prefix}> ", style="bold cyan")
        line.append(text)
        self.console.print(line)
