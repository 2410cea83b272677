"""Command-line interface for promptbot."""

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from promptbot import __version__
from promptbot.adapters.transports import ConsoleTransport
from promptbot.config import Config, get_config
from promptbot.contracts.activity import Activity
from promptbot.contracts.events import EventKind
from promptbot.contracts.state import TopicState, UserProfile
from promptbot.errors import PromptBotError
from promptbot.prompts.schema import list_fields
from promptbot.runtime.bot import PromptBot, open_storage
from promptbot.store.accessors import (
    CONVERSATION_SCOPE,
    USER_SCOPE,
    topic_state_accessor,
    user_profile_accessor,
)
from promptbot.store.turn_log import TurnLogWriter

logger = logging.getLogger(__name__)

console = Console()

QUIT_COMMANDS = {"/quit", "/exit"}


def configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=str(config.LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_chat(args: argparse.Namespace) -> int:
    """Chat with the bot on stdin/stdout."""
    config = get_config()
    conversation_id = args.conversation or config.CONVERSATION_ID
    user_id = args.user or config.USER_ID
    storage = open_storage(config, "memory" if args.memory else None)
    bot = PromptBot.from_config(
        config,
        ConsoleTransport(console),
        storage=storage,
        turn_log=False if args.memory else None,
    )

    async def run_chat() -> None:
        while True:
            try:
                text = console.input("[bold green]you> [/]")
            except EOFError:
                break
            if text.strip() in QUIT_COMMANDS:
                break
            await bot.on_turn(Activity.message(text, conversation_id, user_id))

    console.print(
        f"Conversation [bold]{escape(conversation_id)}[/], "
        f"user [bold]{escape(user_id)}[/]. Type /quit to leave."
    )
    try:
        asyncio.run(run_chat())
    except KeyboardInterrupt:
        console.print("\nInterrupted")
    except PromptBotError as e:
        logger.error(f"Chat stopped: {e}")
        return 1
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show configuration status."""
    config = get_config()

    console.print(f"promptbot {__version__}")
    console.print("=" * 50)
    console.print(f"Config file: {config.source or '(defaults)'}")

    errors = config.validate()
    if errors:
        console.print("\nConfiguration errors:")
        for error in errors:
            console.print(f"  - {error}")
    else:
        console.print("\nConfiguration: OK")

    console.print("\nStorage:")
    console.print(f"  Backend: {config.STORAGE_BACKEND}")
    console.print(f"  Database: {config.state_db_path}")
    console.print(f"  Turn log: {'on' if config.TURN_LOG_ENABLED else 'off'}")

    console.print("\nProfile fields:")
    for field in list_fields():
        console.print(f"  {field.key}: {field.prompt}")

    return 1 if errors else 0


def cmd_show(args: argparse.Namespace) -> int:
    """Show stored topic state and profile."""
    config = get_config()
    if _memory_backend(config):
        return 1
    conversation_id = args.conversation or config.CONVERSATION_ID
    user_id = args.user or config.USER_ID
    storage = open_storage(config)

    async def load() -> tuple[TopicState, UserProfile]:
        topic_state = await topic_state_accessor(storage).get(conversation_id, TopicState.new)
        profile = await user_profile_accessor(storage).get(user_id, UserProfile)
        return topic_state, profile

    try:
        topic_state, profile = asyncio.run(load())
    except PromptBotError as e:
        console.print(f"Error: {e}")
        return 1

    table = Table(title=f"Profile of {user_id}")
    table.add_column("Field")
    table.add_column("Value")
    for field in list_fields():
        table.add_row(field.key, escape(field.get_value(profile) or "-"))
    console.print(table)

    console.print(f"Topic: {topic_state.topic or '-'}")
    console.print(f"Pending prompt: {topic_state.prompt or '-'}")
    return 0


def cmd_history(args: argparse.Namespace) -> int:
    """List conversations in the turn log, or replay one of them."""
    config = get_config()

    if not config.state_db_path.exists():
        console.print(f"No turn log at {config.state_db_path}")
        return 1

    turn_log = TurnLogWriter(config.state_db_path)

    if args.conversation is None:
        return _list_conversations(turn_log, args.limit)

    conversation_id = args.conversation
    if args.kind:
        events = list(reversed(
            turn_log.get_events_by_kind(conversation_id, EventKind(args.kind), args.limit)
        ))
    else:
        events = list(turn_log.replay_conversation(conversation_id))

    if not events:
        console.print(f"No turns recorded for {conversation_id}")
        return 0

    table = Table(title=f"Turn log of {conversation_id}")
    table.add_column("Turn", justify="right")
    table.add_column("Seq", justify="right")
    table.add_column("Time")
    table.add_column("Kind")
    table.add_column("Payload")

    for event in events:
        table.add_row(
            str(event.turn_id),
            str(event.seq),
            event.ts_wall.strftime("%Y-%m-%d %H:%M:%S"),
            event.kind.value,
            escape(", ".join(f"{k}={v!r}" for k, v in event.payload.items())),
        )

    console.print(table)
    return 0


def _list_conversations(turn_log: TurnLogWriter, limit: int) -> int:
    conversation_ids = turn_log.get_conversation_ids(limit)
    if not conversation_ids:
        console.print("No turns recorded")
        return 0

    table = Table(title=f"Conversations ({turn_log.count_events()} events)")
    table.add_column("Conversation")
    table.add_column("Turns", justify="right")
    table.add_column("Events", justify="right")
    for conversation_id in conversation_ids:
        table.add_row(
            escape(conversation_id),
            str(turn_log.get_last_turn_id(conversation_id)),
            str(turn_log.count_events(conversation_id)),
        )
    console.print(table)
    return 0


def _memory_backend(config: Config) -> bool:
    if config.STORAGE_BACKEND == "memory":
        console.print("STORAGE_BACKEND is memory: no state is stored between runs")
        return True
    return False


def cmd_clear(args: argparse.Namespace) -> int:
    """Clear stored state."""
    config = get_config()
    if _memory_backend(config):
        return 1
    storage = open_storage(config)

    if args.target == "conversation":
        removed = storage.clear(CONVERSATION_SCOPE)
    elif args.target == "user":
        removed = storage.clear(USER_SCOPE)
    else:
        confirm = console.input(escape("This will delete ALL state. Continue? [y/N] "))
        if confirm.lower() != "y":
            console.print("Cancelled")
            return 0
        removed = storage.clear()

    console.print(f"Cleared {removed} record(s)")
    return 0


def _add_identity_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--conversation",
        default=None,
        help="Conversation ID (default: CONVERSATION_ID from config)",
    )
    parser.add_argument(
        "--user",
        default=None,
        help="User ID (default: USER_ID from config)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="promptbot",
        description="promptbot - collects a user profile one prompt at a time",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # promptbot chat
    chat_parser = subparsers.add_parser("chat", help="Chat with the bot")
    _add_identity_args(chat_parser)
    chat_parser.add_argument(
        "--memory",
        action="store_true",
        help="Keep state in memory only (nothing is persisted)",
    )
    chat_parser.set_defaults(func=cmd_chat)

    # promptbot status
    status_parser = subparsers.add_parser("status", help="Show configuration status")
    status_parser.set_defaults(func=cmd_status)

    # promptbot show
    show_parser = subparsers.add_parser("show", help="Show stored state")
    _add_identity_args(show_parser)
    show_parser.set_defaults(func=cmd_show)

    # promptbot history
    history_parser = subparsers.add_parser("history", help="Replay a conversation's turn log")
    history_parser.add_argument(
        "--conversation",
        default=None,
        help="Conversation to replay (lists conversations when omitted)",
    )
    history_parser.add_argument(
        "--kind",
        choices=[kind.value for kind in EventKind],
        default=None,
        help="Only show the most recent events of this kind",
    )
    history_parser.add_argument(
        "--limit",
        type=int,
        default=100,
        help="Maximum conversations or events to show (default: 100)",
    )
    history_parser.set_defaults(func=cmd_history)

    # promptbot clear
    clear_parser = subparsers.add_parser("clear", help="Clear stored state")
    clear_parser.add_argument(
        "target",
        choices=["conversation", "user", "all"],
        help="What to clear",
    )
    clear_parser.set_defaults(func=cmd_clear)

    args = parser.parse_args(argv)

    # Show help if no command
    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(get_config())
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
