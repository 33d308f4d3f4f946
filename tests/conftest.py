from typing import Any, Callable

import httpx
import pytest

from apex_api.core.config import Settings
from apex_api.services.gemini_client import GeminiClient, ModelNameCache

GEMINI_BASE = "https://gemini.test/v1"


def _gemini_text_payload(text: str, finish_reason: str = "STOP") -> dict[str, Any]:
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}]}, "finishReason": finish_reason}
        ]
    }


MODELS_PAYLOAD = {
    "models": [
        {"name": "models/text-embedding", "supportedGenerationMethods": ["embedContent"]},
        {"name": "models/gemini-test", "supportedGenerationMethods": ["generateContent", "countTokens"]},
    ]
}


@pytest.fixture
def gemini_settings() -> Settings:
    return Settings(
        gemini_api_key="test-key",
        gemini_api_base=GEMINI_BASE,
        ai_narrative_enabled=True,
    )


@pytest.fixture
def make_gemini_client(gemini_settings: Settings) -> Callable[..., GeminiClient]:
    """Build a client whose HTTP traffic is answered by ``handler``."""

    def _build(
        handler: Callable[[httpx.Request], httpx.Response],
        config: Settings | None = None,
        cache: ModelNameCache | None = None,
    ) -> GeminiClient:
        return GeminiClient(
            config or gemini_settings,
            cache or ModelNameCache(),
            transport=httpx.MockTransport(handler),
        )

    return _build


def _answering(text: str) -> Callable[[httpx.Request], httpx.Response]:
    """Handler that lists one usable model and always replies with ``text``."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/models"):
            return httpx.Response(200, json=MODELS_PAYLOAD)
        return httpx.Response(200, json=_gemini_text_payload(text))

    return _handler


def _failing(status_code: int = 500) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/models"):
            return httpx.Response(200, json=MODELS_PAYLOAD)
        return httpx.Response(status_code, text="upstream unavailable")

    return _handler


@pytest.fixture
def answering() -> Callable[[str], Callable[[httpx.Request], httpx.Response]]:
    return _answering


@pytest.fixture
def failing() -> Callable[[int], Callable[[httpx.Request], httpx.Response]]:
    return _failing


@pytest.fixture
def gemini_text_payload() -> Callable[..., dict[str, Any]]:
    return _gemini_text_payload


@pytest.fixture
def models_payload() -> dict[str, Any]:
    return MODELS_PAYLOAD
