"""Groq API client package — async HTTP interface to the hosted inference API.

WHY: Both bot commands end in a single Groq call (chat completion or
audio transcription). This package encapsulates all Groq communication,
plus the attachment download that feeds the transcription call.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. The GroqClient class
provides one method per endpoint. Response data is parsed into typed
dataclasses defined in models.py.

RULES:
- All HTTP calls go through this package (no direct httpx usage elsewhere)
- Authentication is via Bearer token from BotConfig
"""

from groq_discord_bot.api.client import GroqAPIError, GroqClient, download_attachment
from groq_discord_bot.api.models import ChatCompletion, Transcription

__all__ = [
    "ChatCompletion",
    "GroqAPIError",
    "GroqClient",
    "Transcription",
    "download_attachment",
]
