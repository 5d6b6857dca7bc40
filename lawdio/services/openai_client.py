"""
Thin async client for an OpenAI-compatible REST API.

Covers the two calls the tutor needs:

    POST {base_url}/chat/completions   → completion JSON
    POST {base_url}/audio/speech       → raw audio bytes

One ``httpx.AsyncClient`` is shared for the lifetime of the application and
handed in by the caller.  Requests carry a bounded timeout and are never
retried.  Any failure is raised as ``UpstreamError``; the provider's response
body is logged (truncated) but never propagated.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from lawdio.config import Settings
from lawdio.errors import UpstreamError

logger = logging.getLogger(__name__)


def build_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    """Create the shared provider client with the configured timeout."""
    timeout = httpx.Timeout(settings.UPSTREAM_TIMEOUT, connect=10.0)
    return httpx.AsyncClient(
        base_url=settings.OPENAI_BASE_URL.rstrip("/"),
        timeout=timeout,
        **kwargs,
    )


class OpenAIService:
    """Chat completion and speech synthesis over a shared httpx client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        chat_model: str,
        tts_model: str,
        tts_voice: str,
        tts_format: str = "mp3",
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.chat_model = chat_model
        self.tts_model = tts_model
        self.tts_voice = tts_voice
        self.tts_format = tts_format

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "OpenAIService":
        return cls(
            client,
            api_key=settings.OPENAI_API_KEY,
            chat_model=settings.OPENAI_CHAT_MODEL,
            tts_model=settings.OPENAI_TTS_MODEL,
            tts_voice=settings.OPENAI_TTS_VOICE,
            tts_format=settings.OPENAI_TTS_FORMAT,
        )

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _post(self, path: str, payload: Dict[str, Any], what: str) -> httpx.Response:
        if not self.api_key:
            logger.error("%s: OPENAI_API_KEY is not configured", what)
            raise UpstreamError()

        try:
            resp = await self.client.post(path, json=payload, headers=self._headers())
        except httpx.TimeoutException as exc:
            logger.error("%s: request timed out (%s)", what, type(exc).__name__)
            raise UpstreamError() from exc
        except httpx.HTTPError as exc:
            logger.error("%s: request failed: %s", what, exc)
            raise UpstreamError() from exc

        if not resp.is_success:
            logger.error(
                "%s: provider returned HTTP %d: %s",
                what,
                resp.status_code,
                resp.text[:300],
            )
            raise UpstreamError()
        return resp

    async def chat_completion(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Return the decoded chat-completion response."""
        resp = await self._post(
            "/chat/completions",
            {"model": self.chat_model, "messages": messages},
            "chat_completion",
        )
        try:
            data = resp.json()
        except ValueError as exc:
            logger.error("chat_completion: response was not JSON: %s", resp.text[:300])
            raise UpstreamError() from exc
        if not isinstance(data, dict):
            logger.error("chat_completion: unexpected response shape: %r", type(data))
            raise UpstreamError()
        return data

    async def speech(self, text: str) -> bytes:
        """Return encoded audio for *text* in the configured format."""
        resp = await self._post(
            "/audio/speech",
            {
                "model": self.tts_model,
                "voice": self.tts_voice,
                "input": text,
                "response_format": self.tts_format,
            },
            "speech",
        )
        if not resp.content:
            logger.error("speech: provider returned an empty body")
            raise UpstreamError()
        return resp.content
