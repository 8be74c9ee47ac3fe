"""Groq API response dataclasses.

WHY: The chat-completion and transcription endpoints return nested JSON.
Typed dataclasses make the one read path each handler depends on explicit
(first choice's message content, transcription text) and keep dict
spelunking out of the handlers.

HOW: Each dataclass maps to one Groq JSON object. from_dict factory
methods tolerate absent optional fields, because a missing value is a
normal outcome that handlers replace with a fallback string.

RULES:
- choices may be empty; first_content is None in that case
- message content may be null or absent; parsed as None
- Transcription.text may be absent; parsed as None
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ChatMessage:
    """One message of a chat completion choice."""

    role: str
    content: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatMessage:
        return cls(
            role=data.get("role", "assistant"),
            content=data.get("content"),
        )


@dataclass
class ChatChoice:
    """A single generated alternative from POST /chat/completions."""

    index: int
    message: ChatMessage | None = None
    finish_reason: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatChoice:
        message = data.get("message")
        return cls(
            index=data.get("index", 0),
            message=ChatMessage.from_dict(message) if message else None,
            finish_reason=data.get("finish_reason"),
        )


@dataclass
class ChatCompletion:
    """Response from POST /chat/completions.

    WHY: The ask handler only needs the first choice's text, but keeping
    id and model around makes log lines useful when a reply looks wrong.

    RULES:
    - choices keeps the API order
    - first_content does not distinguish "no choice" from "empty text"
    """

    id: str | None = None
    model: str | None = None
    choices: list[ChatChoice] = field(default_factory=list)

    @property
    def first_content(self) -> str | None:
        if not self.choices or self.choices[0].message is None:
            return None
        return self.choices[0].message.content

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletion:
        return cls(
            id=data.get("id"),
            model=data.get("model"),
            choices=[ChatChoice.from_dict(c) for c in data.get("choices") or []],
        )


@dataclass
class Transcription:
    """Response from POST /audio/transcriptions with response_format=json."""

    text: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Transcription:
        return cls(text=data.get("text"))
