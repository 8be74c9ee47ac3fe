"""Tests for the Discord glue: command schema, registration, and replies.

WHY: Validates that the slash commands are declared with the right
options, that registration clears before it registers and survives
failures, and that interactions are deferred, answered in chunks, and
answered with a fixed error message when anything goes wrong.

HOW: Interactions are MagicMocks with AsyncMock defer/send (see
conftest.py). The command tree is a MagicMock with an AsyncMock sync().
GroqClient is patched in the handlers module so no HTTP happens.

RULES:
- No Discord gateway or HTTP connection
- Each test is independent
"""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import discord

from groq_discord_bot.api.client import GroqAPIError
from groq_discord_bot.api.models import ChatCompletion
from groq_discord_bot.bot import bot as bot_module
from groq_discord_bot.bot import handlers
from groq_discord_bot.bot.bot import (
    BOT_COMMANDS,
    GroqBot,
    ask_command,
    register_commands,
    run_command,
    speech_to_text_command,
)
from groq_discord_bot.bot.handlers import AskRequest, TranscribeRequest
from groq_discord_bot.bot.messages import ASK_ERROR_REPLY, SPEECH_TO_TEXT_ERROR_REPLY
from groq_discord_bot.config import CHAT_MODELS, DEFAULT_CHAT_MODEL


class FakeGroq:
    def __init__(self, completion=None, error=None):
        self.create_chat_completion = AsyncMock(return_value=completion, side_effect=error)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


def _completion(content):
    return ChatCompletion.from_dict(
        {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}
    )


# ---------------------------------------------------------------------------
# Tests: command schema
# ---------------------------------------------------------------------------


class TestCommandSchema:
    """Tests for the registered slash-command definitions."""

    def test_exactly_two_commands(self):
        assert [c.name for c in BOT_COMMANDS] == ["ask", "speechtotext"]

    def test_ask_question_is_required_string(self):
        params = {p.name: p for p in ask_command.parameters}
        question = params["question"]
        assert question.required is True
        assert question.type is discord.AppCommandOptionType.string

    def test_ask_model_is_optional_closed_choice(self):
        params = {p.name: p for p in ask_command.parameters}
        model = params["model"]
        assert model.required is False
        assert [c.value for c in model.choices] == list(CHAT_MODELS)
        assert [c.name for c in model.choices] == list(CHAT_MODELS)
        for name in CHAT_MODELS:
            assert name in model.description

    def test_default_model_is_a_choice(self):
        assert DEFAULT_CHAT_MODEL in CHAT_MODELS

    def test_speechtotext_audio_is_required_attachment(self):
        params = speech_to_text_command.parameters
        assert len(params) == 1
        assert params[0].name == "audio"
        assert params[0].required is True
        assert params[0].type is discord.AppCommandOptionType.attachment


# ---------------------------------------------------------------------------
# Tests: command callbacks
# ---------------------------------------------------------------------------


class TestCommandCallbacks:
    """The callbacks translate Discord options into request objects."""

    def test_ask_without_model(self, interaction):
        with patch.object(bot_module, "run_command", new=AsyncMock()) as run:
            asyncio.run(ask_command.callback(interaction, question="2+2?"))

        run.assert_awaited_once_with(interaction, "ask", AskRequest(question="2+2?", model=None))

    def test_ask_with_model_choice(self, interaction):
        choice = discord.app_commands.Choice(name="gemma2-9b-it", value="gemma2-9b-it")

        with patch.object(bot_module, "run_command", new=AsyncMock()) as run:
            asyncio.run(ask_command.callback(interaction, question="hi", model=choice))

        run.assert_awaited_once_with(interaction, "ask", AskRequest(question="hi", model="gemma2-9b-it"))

    def test_speechtotext_uses_attachment_name_and_url(self, interaction):
        audio = MagicMock()
        audio.filename = "voice.ogg"
        audio.url = "https://cdn.discordapp.com/attachments/1/2/voice.ogg"

        with patch.object(bot_module, "run_command", new=AsyncMock()) as run:
            asyncio.run(speech_to_text_command.callback(interaction, audio=audio))

        run.assert_awaited_once_with(
            interaction,
            "speechtotext",
            TranscribeRequest(filename="voice.ogg", url=audio.url),
        )


# ---------------------------------------------------------------------------
# Tests: run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    """Tests for defer → handler → chunked follow-ups."""

    def test_ask_end_to_end_single_segment(self, interaction):
        fake = FakeGroq(completion=_completion("4"))

        with patch.object(handlers, "GroqClient", return_value=fake):
            asyncio.run(run_command(interaction, "ask", AskRequest(question="2+2?")))

        interaction.response.defer.assert_awaited_once()
        fake.create_chat_completion.assert_awaited_once_with("2+2?", DEFAULT_CHAT_MODEL)
        interaction.followup.send.assert_awaited_once_with("4")

    def test_defer_happens_before_api_call(self, interaction):
        order = []
        interaction.response.defer = AsyncMock(side_effect=lambda *a, **k: order.append("defer"))
        fake = FakeGroq(completion=_completion("ok"))
        fake.create_chat_completion.side_effect = lambda *a: order.append("api") or _completion("ok")

        with patch.object(handlers, "GroqClient", return_value=fake):
            asyncio.run(run_command(interaction, "ask", AskRequest(question="q")))

        assert order == ["defer", "api"]

    def test_long_reply_is_chunked_in_order(self, interaction):
        text = "a" * 2000 + "b" * 2000 + "c" * 10
        fake = FakeGroq(completion=_completion(text))

        with patch.object(handlers, "GroqClient", return_value=fake):
            asyncio.run(run_command(interaction, "ask", AskRequest(question="q")))

        sent = [c.args[0] for c in interaction.followup.send.call_args_list]
        assert sent == ["a" * 2000, "b" * 2000, "c" * 10]
        assert "".join(sent) == text

    def test_api_failure_sends_generic_error(self, interaction, caplog):
        fake = FakeGroq(error=GroqAPIError(401, "invalid api key"))

        with caplog.at_level(logging.ERROR):
            with patch.object(handlers, "GroqClient", return_value=fake):
                asyncio.run(run_command(interaction, "ask", AskRequest(question="q")))

        interaction.followup.send.assert_awaited_once_with(ASK_ERROR_REPLY)
        assert "Error during /ask interaction handling" in caplog.text

    def test_speechtotext_failure_sends_its_own_error(self, interaction):
        failing = AsyncMock(side_effect=OSError("disk full"))

        with patch.object(handlers, "download_attachment", failing):
            asyncio.run(
                run_command(
                    interaction,
                    "speechtotext",
                    TranscribeRequest(filename="a.ogg", url="https://cdn.test/a.ogg"),
                )
            )

        interaction.followup.send.assert_awaited_once_with(SPEECH_TO_TEXT_ERROR_REPLY)

    def test_follow_up_failure_is_swallowed(self, interaction, caplog):
        fake = FakeGroq(error=GroqAPIError(500, "boom"))
        interaction.followup.send = AsyncMock(side_effect=RuntimeError("webhook gone"))

        with caplog.at_level(logging.ERROR):
            with patch.object(handlers, "GroqClient", return_value=fake):
                asyncio.run(run_command(interaction, "ask", AskRequest(question="q")))

        assert "Error sending follow-up for /ask" in caplog.text

    def test_defer_failure_still_attempts_error_reply(self, interaction):
        interaction.response.defer = AsyncMock(side_effect=RuntimeError("interaction expired"))
        fake = FakeGroq(completion=_completion("never"))

        with patch.object(handlers, "GroqClient", return_value=fake):
            asyncio.run(run_command(interaction, "ask", AskRequest(question="q")))

        fake.create_chat_completion.assert_not_awaited()
        interaction.followup.send.assert_awaited_once_with(ASK_ERROR_REPLY)


# ---------------------------------------------------------------------------
# Tests: register_commands
# ---------------------------------------------------------------------------


class TestRegisterCommands:
    """Tests for clear-then-register against the command tree."""

    def test_clears_before_registering(self):
        tree = MagicMock()
        tree.sync = AsyncMock(side_effect=[[], list(BOT_COMMANDS)])

        ok = asyncio.run(register_commands(tree))

        assert ok is True
        names = [c[0] for c in tree.mock_calls]
        assert names == ["clear_commands", "sync", "add_command", "add_command", "sync"]
        tree.clear_commands.assert_called_once_with(guild=None)
        added = [c.args[0] for c in tree.add_command.call_args_list]
        assert added == list(BOT_COMMANDS)

    def test_failure_is_logged_not_raised(self, caplog):
        tree = MagicMock()
        tree.sync = AsyncMock(side_effect=RuntimeError("401 Unauthorized"))

        with caplog.at_level(logging.ERROR):
            ok = asyncio.run(register_commands(tree))

        assert ok is False
        tree.add_command.assert_not_called()
        assert "Error during global command registration process" in caplog.text

    def test_register_failure_after_clear(self):
        tree = MagicMock()
        tree.sync = AsyncMock(side_effect=[[], RuntimeError("rate limited")])

        assert asyncio.run(register_commands(tree)) is False
        assert tree.add_command.call_count == 2


# ---------------------------------------------------------------------------
# Tests: GroqBot
# ---------------------------------------------------------------------------


class TestGroqBot:
    def test_carries_config_and_tree(self, bot_config):
        bot = GroqBot(bot_config)
        assert bot.config is bot_config
        assert isinstance(bot.tree, discord.app_commands.CommandTree)

    def test_presence_is_watching_help(self, bot_config):
        bot = GroqBot(bot_config)
        assert bot.activity is not None
        assert bot.activity.type is discord.ActivityType.watching
        assert bot.activity.name == "/help"

    def test_setup_hook_registers_commands(self, bot_config):
        bot = GroqBot(bot_config)

        with patch.object(bot_module, "register_commands", new=AsyncMock(return_value=True)) as reg:
            asyncio.run(bot.setup_hook())

        reg.assert_awaited_once_with(bot.tree)
