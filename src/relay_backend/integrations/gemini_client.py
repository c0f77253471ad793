from __future__ import annotations

import logging
from typing import Any

import httpx

from relay_backend.integrations.errors import ConfigurationError, read_json

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def extract_text(response: dict[str, Any] | None) -> str:
    """First candidate's first text part, or "" when the response has none."""

    if not isinstance(response, dict):
        return ""
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first_candidate = candidates[0]
    if not isinstance(first_candidate, dict):
        return ""
    content = first_candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""


class GeminiClient:
    def __init__(self, *, http: httpx.AsyncClient, api_key: str | None, model: str) -> None:
        self._http = http
        self._api_key = api_key
        self._model = model

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def generate(self, prompt: str) -> str:
        if not self.configured:
            raise ConfigurationError("Gemini API key is not configured on the server.")

        url = f"{GEMINI_BASE_URL}/models/{self._model}:generateContent"
        resp = await self._http.post(
            url,
            params={"key": self._api_key},
            json={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
            headers={"Content-Type": "application/json"},
        )
        data = read_json(resp)
        text = extract_text(data)
        if not text:
            logger.warning(f"Gemini returned no text for model {self._model}")
        return text
