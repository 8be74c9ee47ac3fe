"""Discord bot: slash-command schema, command registration, and reply glue.

WHY: Users invoke /ask and /speechtotext in Discord and expect the answer
in the same channel. This module is the glue between Discord interactions
and the handlers in handlers.py. It declares the command schema, keeps
the remote command registry in sync, and turns handler results (or
failures) into follow-up messages.

HOW: Uses discord.py's app_commands. GroqBot is a discord.Client with a
CommandTree; setup_hook (runs once per process, after login) clears the
application's global commands and registers the two commands defined
here. Each command callback builds a request object and calls
run_command(), which defers the interaction, dispatches to the handler,
and sends the reply through the chunker.

RULES:
- Interactions are deferred FIRST, before any API call
- The `model` option declares a closed set of choices; Discord rejects
  anything else before the callback runs
- Registration clears before it registers
- Registration failures are logged, never raised
- Per-command failures produce one fixed follow-up; a failure to send
  that follow-up is logged and swallowed
- Runnable as: python -m groq_discord_bot
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import discord
from discord import app_commands

from groq_discord_bot.bot.handlers import (
    COMMANDS,
    AskRequest,
    TranscribeRequest,
    dispatch,
)
from groq_discord_bot.bot.messages import (
    ASK_DESCRIPTION,
    ASK_QUESTION_DESCRIPTION,
    COMMAND_ASK,
    COMMAND_SPEECH_TO_TEXT,
    PRESENCE_TEXT,
    SPEECH_TO_TEXT_AUDIO_DESCRIPTION,
    SPEECH_TO_TEXT_DESCRIPTION,
    model_option_description,
    send_long_message,
)
from groq_discord_bot.config import CHAT_MODELS, BotConfig

logger = logging.getLogger(__name__)

MODEL_CHOICES: List[app_commands.Choice[str]] = [
    app_commands.Choice(name=model, value=model) for model in CHAT_MODELS
]


# ---------------------------------------------------------------------------
# Reply glue
# ---------------------------------------------------------------------------


async def run_command(interaction: discord.Interaction, command_name: str, request: Any) -> None:
    """Defer, run the command's handler, and send the reply in chunks.

    WHY: Discord drops an interaction that is not answered within three
    seconds; Groq calls can take longer. Deferring shows "thinking..."
    and lets the real answer arrive as follow-ups.

    HOW: The config is read from the client the interaction arrived on
    (GroqBot.config). Any exception is logged and answered with the
    command's fixed error reply.

    RULES:
    - defer() is awaited before the handler runs
    - Segments are sent as follow-ups, in order
    - Never raises
    """
    route = COMMANDS[command_name]
    config = interaction.client.config

    try:
        await interaction.response.defer()
        reply = await dispatch(command_name, request, config)
        await send_long_message(interaction.followup.send, reply)
    except Exception:
        logger.exception("Error during /%s interaction handling", command_name)
        try:
            await interaction.followup.send(route.error_reply)
        except Exception:
            logger.exception("Error sending follow-up for /%s", command_name)


# ---------------------------------------------------------------------------
# Slash commands
# ---------------------------------------------------------------------------


@app_commands.command(name=COMMAND_ASK, description=ASK_DESCRIPTION)
@app_commands.describe(
    question=ASK_QUESTION_DESCRIPTION,
    model=model_option_description(CHAT_MODELS),
)
@app_commands.choices(model=MODEL_CHOICES)
async def ask_command(
    interaction: discord.Interaction,
    question: str,
    model: Optional[app_commands.Choice[str]] = None,
) -> None:
    request = AskRequest(question=question, model=model.value if model else None)
    await run_command(interaction, COMMAND_ASK, request)


@app_commands.command(name=COMMAND_SPEECH_TO_TEXT, description=SPEECH_TO_TEXT_DESCRIPTION)
@app_commands.describe(audio=SPEECH_TO_TEXT_AUDIO_DESCRIPTION)
async def speech_to_text_command(
    interaction: discord.Interaction,
    audio: discord.Attachment,
) -> None:
    request = TranscribeRequest(filename=audio.filename, url=audio.url)
    await run_command(interaction, COMMAND_SPEECH_TO_TEXT, request)


BOT_COMMANDS = (ask_command, speech_to_text_command)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_commands(tree: app_commands.CommandTree) -> bool:
    """Replace the application's global commands with BOT_COMMANDS.

    WHY: Stale commands from earlier deployments would otherwise linger in
    users' command pickers next to the current ones.

    HOW: Clears the tree's global commands and syncs (remote clear-all),
    then adds BOT_COMMANDS and syncs again (remote register).

    RULES:
    - Clear is synced before register
    - Returns True on success, False after logging a failure
    - No rollback: a failure after the clear leaves the registry empty
    """
    try:
        logger.info("Starting to clear global commands...")
        tree.clear_commands(guild=None)
        await tree.sync()
        logger.info("Cleared all global commands.")

        for command in BOT_COMMANDS:
            tree.add_command(command)
        synced = await tree.sync()
        logger.info(
            "Successfully registered %d global application commands.", len(synced)
        )
        return True
    except Exception:
        logger.exception("Error during global command registration process")
        return False


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class GroqBot(discord.Client):
    """Discord client carrying the process config and the command tree."""

    def __init__(self, config: BotConfig) -> None:
        super().__init__(
            intents=discord.Intents.default(),
            activity=discord.Activity(type=discord.ActivityType.watching, name=PRESENCE_TEXT),
            application_id=config.client_id,
        )
        self.config = config
        self.tree = app_commands.CommandTree(self)

    async def setup_hook(self) -> None:
        await register_commands(self.tree)

    async def on_ready(self) -> None:
        logger.info("Bot is ready! Logged in as %s", self.user)


def create_bot(config: BotConfig) -> GroqBot:
    """Create the Discord client for `config`."""
    return GroqBot(config)
