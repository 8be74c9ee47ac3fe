"""Discord bot integration for the Groq relay.

WHY: Users in Discord need to ask a language model a question or get a
voice note transcribed without leaving the channel. This package provides
the slash commands, the handlers behind them, and the chunked replies.

HOW: bot.py owns everything Discord-specific (command schema, registry
sync, deferral, follow-ups). handlers.py holds plain async functions of
(request, config) that call the Groq API. messages.py holds the reply
strings and the 2000-character chunker; scratch.py the temp files.

RULES:
- Requires DISCORD_TOKEN and GROQ_API_KEY
- All interactions are deferred before any API call
"""
