"""Configuration constants, model catalogue, and .env loading.

WHY: Centralizes every configurable value so it is easy to find, update,
and override. The model catalogue, Groq endpoint defaults, and the fixed
transcription parameters are plain data, not buried in handler logic,
so the command schema and the handlers read from one place.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level tuples and strings. load_config() reads the environment
once and returns an immutable BotConfig that is handed to the Discord
client and from there to every command handler.

RULES:
- CHAT_MODELS is the closed set offered by the /ask `model` option
- DEFAULT_CHAT_MODEL must be a member of CHAT_MODELS
- Secrets are loaded from .env via python-dotenv, never hardcoded
- load_config() raises ValueError when a required secret is missing
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the working directory the bot is started in
load_dotenv()

# ---------------------------------------------------------------------------
# Model catalogue
# ---------------------------------------------------------------------------

CHAT_MODELS: tuple[str, ...] = (
    "gemma2-9b-it",
    "mixtral-8x7b-32768",
    "llama-3.1-70b-versatile",
)
"""Models selectable through the /ask `model` option."""

DEFAULT_CHAT_MODEL = "llama-3.1-70b-versatile"

# ---------------------------------------------------------------------------
# Transcription parameters (fixed per request)
# ---------------------------------------------------------------------------

TRANSCRIPTION_MODEL = "whisper-large-v3"
TRANSCRIPTION_PROMPT = ""
TRANSCRIPTION_RESPONSE_FORMAT = "json"
TRANSCRIPTION_LANGUAGE = "en"
TRANSCRIPTION_TEMPERATURE = 0.0

# ---------------------------------------------------------------------------
# Groq API defaults
# ---------------------------------------------------------------------------

GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")

HTTP_TIMEOUT_S = 300.0
HTTP_CONNECT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class BotConfig:
    """Process-wide settings, built once at startup.

    WHY: Handlers need credentials and a scratch directory. Passing one
    explicit object keeps them free of hidden globals and lets tests
    substitute credentials and paths.

    RULES:
    - Immutable after construction
    - client_id is optional; discord.py resolves it at login when absent
    """

    discord_token: str
    groq_api_key: str
    client_id: Optional[int] = None
    groq_base_url: str = GROQ_BASE_URL
    temp_dir: Path = Path(tempfile.gettempdir())
    default_model: str = DEFAULT_CHAT_MODEL


def _require(name: str, hint: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(
            f"{hint} not configured. Add {name} to the .env file or the environment."
        )
    return value


def load_config(temp_dir: Optional[str] = None) -> BotConfig:
    """Build the BotConfig from the environment.

    WHY: The token, client ID and API key are required before the bot can
    log in or answer a single command. Reading them once at startup gives
    a clear error instead of a failure on the first interaction.

    HOW: Reads DISCORD_TOKEN, DISCORD_CLIENT_ID, GROQ_API_KEY and
    BOT_TEMP_DIR from os.environ (populated by python-dotenv). An explicit
    temp_dir argument (from the CLI) wins over BOT_TEMP_DIR.

    RULES:
    - Raises ValueError if DISCORD_TOKEN or GROQ_API_KEY is missing or empty
    - Raises ValueError if DISCORD_CLIENT_ID is set but not an integer
    - temp_dir defaults to the platform temp directory
    """
    discord_token = _require("DISCORD_TOKEN", "Discord bot token")
    groq_api_key = _require("GROQ_API_KEY", "Groq API key")

    raw_client_id = os.getenv("DISCORD_CLIENT_ID", "").strip()
    client_id = None  # type: Optional[int]
    if raw_client_id:
        try:
            client_id = int(raw_client_id)
        except ValueError:
            raise ValueError(
                f"DISCORD_CLIENT_ID must be a numeric application ID, got {raw_client_id!r}"
            ) from None

    scratch = temp_dir or os.getenv("BOT_TEMP_DIR", "").strip() or tempfile.gettempdir()

    return BotConfig(
        discord_token=discord_token,
        groq_api_key=groq_api_key,
        client_id=client_id,
        groq_base_url=os.getenv("GROQ_BASE_URL", GROQ_BASE_URL).rstrip("/"),
        temp_dir=Path(scratch),
    )
