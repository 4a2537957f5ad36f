"""Command-line entry point for the feedback relay.

Subcommands::

    python main.py sync --message "Deploy?" --option Yes --option No
    python main.py test
    python main.py detect-chat-id

``sync`` streams session events to stdout as JSON lines until it receives
SIGINT/SIGTERM; logs go to stderr and ``logs/relay.log``.
"""

import argparse
import asyncio
import contextlib
import signal
import sys

from config import ConfigurationError, load_settings
from core.logger import RelayLogger
from relay.connection import check_connection, detect_chat_id
from relay.events import JsonLinesSink
from relay.starter import start_feedback_session
from sdk.client import BotClient
from sdk.exceptions import BotClientError

logger = RelayLogger.get_logger()


async def _run_sync(args: argparse.Namespace) -> int:
    settings = load_settings()
    running = await start_feedback_session(
        settings,
        args.message,
        args.option,
        JsonLinesSink(),
        is_markdown=args.markdown,
    )
    if running is None:
        return 0

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Signal handlers are unavailable on Windows event loops.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, running.stop_event.set)
    await running.task
    return 0


async def _run_test(args: argparse.Namespace) -> int:
    print(await check_connection(load_settings()))
    return 0


async def _run_detect(args: argparse.Namespace) -> int:
    settings = load_settings()
    if not settings.bot_token:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN is required to detect the chat id")
    client = BotClient(settings.bot_token, settings.custom_api_url)
    event = await detect_chat_id(client, JsonLinesSink(), max_polls=args.max_polls)
    return 0 if event is not None else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="feedback-relay", description="Relay a feedback request to a Telegram chat.")
    commands = parser.add_subparsers(dest="command", required=True)

    sync = commands.add_parser("sync", help="post a feedback request and stream the answers")
    sync.add_argument("--message", required=True, help="text describing the pending choice")
    sync.add_argument("--option", action="append", default=[], help="predefined option (repeatable)")
    sync.add_argument("--markdown", action="store_true", help="send the message with Markdown formatting")
    sync.set_defaults(handler=_run_sync)

    test = commands.add_parser("test", help="verify the bot token and chat id")
    test.set_defaults(handler=_run_test)

    detect = commands.add_parser("detect-chat-id", help="wait for a message to the bot and print its chat id")
    detect.add_argument("--max-polls", type=int, default=30, help="number of one-second polls before giving up")
    detect.set_defaults(handler=_run_detect)

    return parser


def cli(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        return asyncio.run(args.handler(args))
    except ConfigurationError as exc:
        logger.error("Configuration error", extra={"error": str(exc), "command": args.command})
        return 2
    except BotClientError as exc:
        logger.error("Bot API request failed", extra={"error": str(exc), "command": args.command})
        return 1
    finally:
        RelayLogger().cleanup()


if __name__ == "__main__":
    sys.exit(cli())
