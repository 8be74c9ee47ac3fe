"""Command-line entry point that starts the Discord bot.

WHY: Operators run the bot as a long-lived process, e.g. under systemd or
in a container. The CLI wires together logging, configuration loading,
and the discord.py login loop behind a single command.

HOW: Uses argparse for the log level and an optional scratch directory,
configures the root logger, builds the BotConfig from the environment
(.env via python-dotenv), and blocks in GroqBot.run().

RULES:
- Missing configuration is logged and exits with status 2
- Login failure is logged and exits with status 1
- Command registration failure is NOT fatal (handled inside the bot)
- discord.py gets log_handler=None so the root logging config applies
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import discord

from groq_discord_bot.bot.bot import create_bot
from groq_discord_bot.config import load_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() lets tests inspect
    the parser without logging in to Discord.
    """
    parser = argparse.ArgumentParser(
        prog="groq_discord_bot",
        description="Run a Discord bot that relays /ask and /speechtotext "
                    "slash commands to the Groq inference API.",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: %(default)s).",
    )

    parser.add_argument(
        "--temp-dir",
        default=None,
        help="Directory for downloaded attachments "
             "(default: BOT_TEMP_DIR or the platform temp directory).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Returns the process exit status
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        config = load_config(temp_dir=args.temp_dir)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    bot = create_bot(config)
    logger.info("Scratch directory: %s", config.temp_dir)

    try:
        bot.run(config.discord_token, log_handler=None)
    except discord.LoginFailure:
        logger.exception("Error logging in")
        return 1

    logger.info("Bot shutdown complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
