"""Command handlers and the dispatch table keyed by command name.

WHY: Each slash command boils down to "turn a request into reply text".
Keeping that step free of Discord objects means it can be tested with a
substituted config and a fake Groq client, without a gateway connection.

HOW: Every handler is an async function of (request, config) that opens
its own GroqClient, makes one API call, and returns the text to send.
COMMANDS maps each command name to its handler and the fixed reply used
when the handler raises. bot.py does the Discord side (defer, chunked
follow-ups, error reply).

RULES:
- Handlers never talk to Discord
- Handlers return a non-empty string; absent API text becomes a fallback
- Exceptions propagate to the caller, which owns the user-facing error
- /speechtotext deletes its scratch file on every exit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from groq_discord_bot.api.client import GroqClient, download_attachment
from groq_discord_bot.bot.messages import (
    ASK_ERROR_REPLY,
    COMMAND_ASK,
    COMMAND_SPEECH_TO_TEXT,
    NO_COMPLETION_REPLY,
    NO_TRANSCRIPTION_REPLY,
    SPEECH_TO_TEXT_ERROR_REPLY,
)
from groq_discord_bot.bot.scratch import scratch_file
from groq_discord_bot.config import BotConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AskRequest:
    """Arguments of /ask. model is None when the user left it out."""

    question: str
    model: Optional[str] = None


@dataclass(frozen=True)
class TranscribeRequest:
    """Arguments of /speechtotext: the attachment's name and CDN URL."""

    filename: str
    url: str


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _groq_client(config: BotConfig) -> GroqClient:
    return GroqClient(api_key=config.groq_api_key, base_url=config.groq_base_url)


async def handle_ask(request: AskRequest, config: BotConfig) -> str:
    """Answer a question with a single Groq chat completion.

    RULES:
    - model defaults to config.default_model
    - Returns the first choice's content, or NO_COMPLETION_REPLY
    """
    model = request.model or config.default_model

    async with _groq_client(config) as groq:
        completion = await groq.create_chat_completion(request.question, model)

    logger.info("Chat completion %s from %s", completion.id, model)
    return completion.first_content or NO_COMPLETION_REPLY


async def handle_speech_to_text(request: TranscribeRequest, config: BotConfig) -> str:
    """Download an audio attachment and transcribe it.

    WHY: Groq's transcription endpoint needs the bytes as an upload, while
    Discord only hands us a CDN URL.

    HOW: Streams the attachment into a scratch file, uploads it under the
    attachment's original name, and removes the scratch file afterwards.

    RULES:
    - A failed download raises before the transcription call is made
    - Returns the transcription text, or NO_TRANSCRIPTION_REPLY
    """
    with scratch_file(config.temp_dir, request.filename) as path:
        size = await download_attachment(request.url, path)
        logger.info("Downloaded %s (%d bytes)", request.filename, size)

        async with _groq_client(config) as groq:
            transcription = await groq.create_transcription(path, filename=request.filename)

    return transcription.text or NO_TRANSCRIPTION_REPLY


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandRoute:
    """A dispatch-table entry: the handler and its generic failure reply."""

    handler: Callable[[Any, BotConfig], Awaitable[str]]
    error_reply: str


COMMANDS: Dict[str, CommandRoute] = {
    COMMAND_ASK: CommandRoute(handle_ask, ASK_ERROR_REPLY),
    COMMAND_SPEECH_TO_TEXT: CommandRoute(handle_speech_to_text, SPEECH_TO_TEXT_ERROR_REPLY),
}


async def dispatch(command_name: str, request: Any, config: BotConfig) -> str:
    """Run the handler registered for command_name.

    Raises KeyError for an unknown command name.
    """
    route = COMMANDS[command_name]
    return await route.handler(request, config)
