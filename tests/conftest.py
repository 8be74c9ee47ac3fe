"""Shared test fixtures for the groq_discord_bot test suite.

WHY: Handler, client and bot tests all need a BotConfig with throwaway
credentials, realistic Groq response bodies, and a fake Discord
interaction. Centralizing them keeps every test module on the same data.

HOW: Pytest fixtures build a BotConfig rooted in tmp_path, sample JSON
bodies shaped like the Groq OpenAI-compatible responses, and a
MagicMock interaction whose response.defer and followup.send are
AsyncMocks.

RULES:
- No fixture touches the network or a Discord gateway
- The config's temp_dir is a per-test directory so scratch files can be
  checked for cleanup
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from groq_discord_bot.config import BotConfig


@pytest.fixture
def bot_config(tmp_path):
    """BotConfig with fake credentials and a per-test scratch directory."""
    return BotConfig(
        discord_token="discord-test-token",
        groq_api_key="gsk_test_key",
        client_id=123456789012345678,
        groq_base_url="https://groq.test/openai/v1",
        temp_dir=tmp_path,
    )


@pytest.fixture
def completion_response() -> Dict[str, Any]:
    """A chat completion body with a single populated choice."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": "llama-3.1-70b-versatile",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "4"},
                "finish_reason": "stop",
            }
        ],
    }


@pytest.fixture
def transcription_response() -> Dict[str, Any]:
    """A transcription body for response_format=json."""
    return {"text": " Hello from the voice note."}


@pytest.fixture
def interaction(bot_config):
    """A fake discord.Interaction arriving on a GroqBot."""
    fake = MagicMock()
    fake.client.config = bot_config
    fake.response.defer = AsyncMock()
    fake.followup.send = AsyncMock()
    return fake
