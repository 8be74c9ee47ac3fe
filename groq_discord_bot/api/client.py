"""Async HTTP client for the Groq OpenAI-compatible inference API.

WHY: Both slash commands end in exactly one Groq call: a chat completion
or an audio transcription. This module hides the HTTP details behind a
small client class so the handlers only deal with typed results.

HOW: Uses httpx.AsyncClient for non-blocking HTTP inside discord.py's
event loop. GroqClient is an async context manager; enter it to get an
authenticated client, exit to close the connection pool. A separate
download_attachment() helper streams a Discord CDN file to local disk.

RULES:
- Always use the async context manager (async with GroqClient(...) as groq:)
- Authentication is a Bearer token from BotConfig.groq_api_key
- Non-2xx Groq responses raise GroqAPIError
- No retries; one request per call
- Transcription parameters are fixed (see config.TRANSCRIPTION_*)
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from groq_discord_bot.api.models import ChatCompletion, Transcription
from groq_discord_bot.config import (
    GROQ_BASE_URL,
    HTTP_CONNECT_TIMEOUT_S,
    HTTP_TIMEOUT_S,
    TRANSCRIPTION_LANGUAGE,
    TRANSCRIPTION_MODEL,
    TRANSCRIPTION_PROMPT,
    TRANSCRIPTION_RESPONSE_FORMAT,
    TRANSCRIPTION_TEMPERATURE,
)

logger = logging.getLogger(__name__)

_DOWNLOAD_CHUNK_BYTES = 64 * 1024


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(HTTP_TIMEOUT_S, connect=HTTP_CONNECT_TIMEOUT_S)


class GroqAPIError(Exception):
    """Raised when the Groq API returns an error response.

    WHY: Callers and logs need the HTTP status to tell an auth problem
    from a rate limit or a bad model name.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Groq API error {status_code}: {message}")


class GroqClient:
    """Async client for Groq chat completions and audio transcriptions.

    WHY: Provides a typed interface for the two calls the bot makes and
    handles auth and error wrapping in one place.

    HOW: Wraps httpx.AsyncClient with Bearer token auth. The optional
    transport argument lets tests plug in httpx.MockTransport.

    RULES:
    - Use as: async with GroqClient(api_key) as groq: ...
    - base_url defaults to GROQ_BASE_URL from config
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or GROQ_BASE_URL).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GroqClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=_default_timeout(),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GroqClient must be used as an async context manager: "
                "async with GroqClient(api_key) as groq: ..."
            )
        return self._client

    async def create_chat_completion(self, question: str, model: str) -> ChatCompletion:
        """Send a single-turn chat completion request.

        WHY: /ask is stateless: the question is the only user message,
        with no system prompt and no history.

        HOW: POSTs {"messages": [{"role": "user", "content": question}],
        "model": model} to /chat/completions and parses the JSON body.

        RULES:
        - Raises GroqAPIError on non-2xx responses
        - Returns the parsed ChatCompletion (choices may be empty)

        Args:
            question: The user's question, sent verbatim.
            model: A Groq chat model identifier.

        Returns:
            The parsed ChatCompletion.
        """
        client = self._ensure_client()
        body = {
            "messages": [{"role": "user", "content": question}],
            "model": model,
        }

        logger.debug("Requesting chat completion from %s", model)
        resp = await client.post("/chat/completions", json=body)
        if resp.status_code != 200:
            raise GroqAPIError(resp.status_code, resp.text)

        return ChatCompletion.from_dict(resp.json())

    async def create_transcription(
        self,
        file_path: Path,
        filename: str | None = None,
    ) -> Transcription:
        """Upload a local audio file and return its transcription.

        WHY: Whisper on Groq accepts a multipart upload and returns the
        recognized text in one round trip.

        HOW: Sends the file under `filename` (so the server can infer the
        audio format from its extension) along with the fixed model,
        prompt, response format, language hint and temperature.

        RULES:
        - file_path must point to an existing file
        - filename defaults to file_path.name
        - Raises GroqAPIError on non-2xx responses
        """
        client = self._ensure_client()
        file_path = Path(file_path)
        data = {
            "model": TRANSCRIPTION_MODEL,
            "prompt": TRANSCRIPTION_PROMPT,
            "response_format": TRANSCRIPTION_RESPONSE_FORMAT,
            "language": TRANSCRIPTION_LANGUAGE,
            "temperature": str(TRANSCRIPTION_TEMPERATURE),
        }

        logger.debug("Uploading %s for transcription", file_path)
        with open(file_path, "rb") as f:
            resp = await client.post(
                "/audio/transcriptions",
                data=data,
                files={"file": (filename or file_path.name, f)},
            )

        if resp.status_code != 200:
            raise GroqAPIError(resp.status_code, resp.text)

        return Transcription.from_dict(resp.json())


async def download_attachment(
    url: str,
    dest: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Stream a remote file to dest and return the number of bytes written.

    WHY: Discord attachments live on a public CDN URL. Streaming keeps
    large voice recordings out of memory.

    RULES:
    - Raises httpx.HTTPStatusError on non-2xx responses
    - dest is created or truncated; it is not removed here on failure
      (the caller owns the scratch file's lifetime)
    """
    written = 0
    async with httpx.AsyncClient(
        timeout=_default_timeout(),
        transport=transport,
        follow_redirects=True,
    ) as http:
        async with http.stream("GET", url) as resp:
            resp.raise_for_status()
            with open(dest, "wb") as out:
                async for chunk in resp.aiter_bytes(_DOWNLOAD_CHUNK_BYTES):
                    out.write(chunk)
                    written += len(chunk)

    logger.debug("Downloaded %d bytes to %s", written, dest)
    return written
