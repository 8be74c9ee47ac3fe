"""Reply strings, command descriptions, and the long-message chunker.

WHY: Discord rejects messages longer than 2000 characters, and model
answers or transcripts routinely exceed that. Centralizing the fixed
user-facing strings here also keeps bot.py and handlers.py focused on
event handling and API calls.

HOW: chunk_message() slices the reply into consecutive fixed-size
segments. send_long_message() awaits a send callable once per segment,
in order. Everything else is plain string constants.

RULES:
- Segments are at most MAX_MESSAGE_LENGTH characters
- Concatenating the segments reproduces the input exactly
- Empty text produces no segments
- A failed send stops emission and propagates to the caller
- Command names must match the dispatch table in handlers.py
"""

from __future__ import annotations

from typing import Awaitable, Callable, List

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_MESSAGE_LENGTH = 2000
"""Discord's per-message character limit."""

# Command names, must match the dispatch table in handlers.py
COMMAND_ASK = "ask"
COMMAND_SPEECH_TO_TEXT = "speechtotext"

ASK_DESCRIPTION = "Ask a question to the AI model"
ASK_QUESTION_DESCRIPTION = "The question you want to ask"
SPEECH_TO_TEXT_DESCRIPTION = "Convert speech in an audio file to text using AI"
SPEECH_TO_TEXT_AUDIO_DESCRIPTION = "The audio file you want to transcribe"

PRESENCE_TEXT = "/help"

# Fallbacks when the API answers without text
NO_COMPLETION_REPLY = "No response from AI model."
NO_TRANSCRIPTION_REPLY = "No transcription could be generated."

# Generic per-command failure replies
ASK_ERROR_REPLY = "There was an error with the API request."
SPEECH_TO_TEXT_ERROR_REPLY = "There was an error processing the audio file."


def model_option_description(models: tuple) -> str:
    """Describe the /ask `model` option, listing every selectable model."""
    return "The model you want to use ({})".format(", ".join(models))


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------


def chunk_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Split text into consecutive segments of at most `limit` characters.

    RULES:
    - len(result) == ceil(len(text) / limit), 0 for empty text
    - "".join(result) == text
    - No attempt is made to break on whitespace
    """
    if limit <= 0:
        raise ValueError("limit must be positive, got {}".format(limit))
    return [text[i:i + limit] for i in range(0, len(text), limit)]


async def send_long_message(
    send: Callable[[str], Awaitable[object]],
    text: str,
    limit: int = MAX_MESSAGE_LENGTH,
) -> int:
    """Send text through `send`, one Discord-sized segment at a time.

    WHY: A deferred interaction is answered with follow-up messages, each
    capped at 2000 characters.

    HOW: Awaits send(segment) for each segment before sending the next,
    so segments arrive in their original order.

    RULES:
    - Returns the number of segments sent
    - The first exception from send() propagates; later segments are dropped
    """
    segments = chunk_message(text, limit)
    for segment in segments:
        await send(segment)
    return len(segments)
