"""
Shared fixtures for Lawdio backend tests.

Each test gets its own application built by ``create_app`` with an in-memory
notes store and an httpx client whose transport is a ``MockTransport`` that
plays the LLM / speech provider.  No network access and no files outside
``tmp_path`` are touched.
"""
from __future__ import annotations

import os
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the module-level app (built on import) off the real filesystem.
os.environ["NOTES_BACKEND"] = "memory"

from lawdio.config import Settings  # noqa: E402
from lawdio.main import create_app  # noqa: E402
from lawdio.services.openai_client import build_http_client  # noqa: E402
from lawdio.services.storage import InMemoryNotesStorage  # noqa: E402

TEST_API_KEY = "sk-test-secret-key"
FAKE_AUDIO = b"ID3\x04\x00fake-mp3-bytes"


# ---------------------------------------------------------------------------
# Fake provider
# ---------------------------------------------------------------------------

class FakeProvider:
    """
    Stand-in for the OpenAI-compatible API.

    Set ``chat_error`` / ``speech_error`` to an exception (raised inside the
    transport) or an int (returned as that HTTP status) to simulate failures.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.answer: Optional[str] = "Consideration is something of value exchanged."
        self.chat_error: Any = None
        self.speech_error: Any = None
        self.audio: bytes = FAKE_AUDIO

    def calls_to(self, suffix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    def _failure(self, error: Any, request: httpx.Request) -> httpx.Response:
        if isinstance(error, Exception):
            raise error
        return httpx.Response(error, json={"error": {"message": "upstream says no"}})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path.endswith("/chat/completions"):
            if self.chat_error is not None:
                return self._failure(self.chat_error, request)
            message: Dict[str, Any] = {"role": "assistant", "content": self.answer}
            return httpx.Response(200, json={"choices": [{"index": 0, "message": message}]})

        if request.url.path.endswith("/audio/speech"):
            if self.speech_error is not None:
                return self._failure(self.speech_error, request)
            return httpx.Response(200, content=self.audio, headers={"Content-Type": "audio/mpeg"})

        return httpx.Response(404)


# ---------------------------------------------------------------------------
# Per-test fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def notes_storage() -> InMemoryNotesStorage:
    return InMemoryNotesStorage()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        OPENAI_API_KEY=TEST_API_KEY,
        NOTES_BACKEND="memory",
        NOTES_DIR=str(tmp_path / "notes"),
        PUBLIC_DIR=str(tmp_path / "public"),
        TTS_ENABLED=True,
        TTS_TEXT_ONLY_FALLBACK=False,
    )


@pytest_asyncio.fixture
async def provider_client(
    settings: Settings, fake_provider: FakeProvider
) -> AsyncGenerator[httpx.AsyncClient, None]:
    client = build_http_client(settings, transport=httpx.MockTransport(fake_provider.handler))
    async with client:
        yield client


@pytest.fixture
def make_app(settings: Settings, notes_storage, provider_client):
    """Factory so tests can tweak settings or storage before building the app."""

    def _make(settings_override: Optional[Settings] = None, storage=None):
        return create_app(
            settings=settings_override or settings,
            storage=storage or notes_storage,
            http_client=provider_client,
        )

    return _make


@pytest_asyncio.fixture
async def client(make_app) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient wired to a freshly built app."""
    transport = ASGITransport(app=make_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
