"""Thin client for the Gemini generative-language REST API."""

from __future__ import annotations

import json
import re
import threading
from typing import Any, Optional

import httpx
import structlog

from apex_api.core.config import Settings

logger = structlog.get_logger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class GeminiError(RuntimeError):
    """Raised when the Gemini API cannot produce usable text."""


class ModelNameCache:
    """Remembers the discovered model name for the lifetime of the process."""

    def __init__(self, name: Optional[str] = None) -> None:
        self._name = name
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            return self._name

    def set(self, name: str) -> None:
        with self._lock:
            self._name = name

    def invalidate(self) -> None:
        with self._lock:
            self._name = None


class GeminiClient:
    def __init__(
        self,
        config: Settings,
        model_cache: ModelNameCache,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config
        self.model_cache = model_cache
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.config.gemini_api_key)

    def _http(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.config.gemini_timeout_seconds,
            transport=self._transport,
        )

    def _url(self, path: str) -> str:
        return f"{self.config.gemini_api_base.rstrip('/')}/{path}"

    def resolve_model(self) -> str:
        cached = self.model_cache.get()
        if cached:
            return cached

        try:
            with self._http() as client:
                response = client.get(
                    self._url("models"), params={"key": self.config.gemini_api_key}
                )
            response.raise_for_status()
            payload = response.json()
            models = (payload.get("models") or []) if isinstance(payload, dict) else []
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("gemini_model_discovery_failed", error=str(exc))
            return self.config.gemini_fallback_model

        for model in models if isinstance(models, list) else []:
            if not isinstance(model, dict) or not isinstance(model.get("name"), str):
                continue
            methods = model.get("supportedGenerationMethods")
            if isinstance(methods, list) and "generateContent" in methods:
                name = model["name"]
                self.model_cache.set(name)
                logger.info("gemini_model_selected", model=name)
                return name
        return self.config.gemini_fallback_model

    def generate_content(
        self, prompt: str, generation_config: Optional[dict[str, Any]] = None
    ) -> str:
        if not self.configured:
            raise GeminiError("API key not configured")

        model_name = self.resolve_model()
        body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if generation_config:
            body["generationConfig"] = generation_config

        try:
            with self._http() as client:
                response = client.post(
                    self._url(f"{model_name}:generateContent"),
                    params={"key": self.config.gemini_api_key},
                    json=body,
                )
        except httpx.HTTPError as exc:
            raise GeminiError(f"Gemini request failed: {exc}") from exc

        if response.status_code != 200:
            logger.warning(
                "gemini_bad_status", status=response.status_code, body=response.text[:500]
            )
            raise GeminiError(f"API returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise GeminiError("Gemini returned a non-JSON body") from exc

        candidates = (data.get("candidates") or []) if isinstance(data, dict) else []
        if not isinstance(candidates, list) or not candidates:
            raise GeminiError("Gemini returned no candidates")
        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise GeminiError("Gemini returned a malformed candidate")
        if candidate.get("finishReason") == "SAFETY":
            raise GeminiError("Gemini response was blocked by safety filters")

        content = candidate.get("content") or {}
        parts = (content.get("parts") or []) if isinstance(content, dict) else None
        if not isinstance(parts, list) or not all(isinstance(part, dict) for part in parts):
            raise GeminiError("Gemini returned malformed content parts")
        text = "".join(str(part.get("text", "")) for part in parts).strip()
        if not text:
            raise GeminiError("Empty response from Gemini")
        return text


def extract_json_object(text: str) -> dict[str, Any]:
    cleaned = _CODE_FENCE.sub("", text).strip()
    match = _JSON_OBJECT.search(cleaned)
    if not match:
        raise GeminiError("No JSON object in Gemini response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise GeminiError(f"Could not parse Gemini JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise GeminiError("Gemini JSON is not an object")
    return parsed
