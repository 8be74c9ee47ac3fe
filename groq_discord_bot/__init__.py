"""Groq Discord Bot — slash-command relay to the Groq inference API.

WHY: Discord users want quick answers from hosted language models and
quick transcripts of voice notes without leaving the chat. This package
turns two slash commands into Groq API calls and posts the text back.

HOW: Three layers: config (environment, model catalogue), api (async
Groq client), bot (command schema, handlers, message chunking). Each
layer is independently testable.

RULES:
- Handlers are plain async functions of (request, config)
- Replies longer than Discord's 2000-character limit are split, never cut
"""

__version__ = "0.1.0"
