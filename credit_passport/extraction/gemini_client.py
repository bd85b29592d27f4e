"""
Gemini generateContent transport for the extraction adapter.

One POST per prompt, JSON response requested. Non-2xx responses and
connection failures become TransportError with status and body; there are no
retries. The timeout comes from Settings.http_timeout_sec.
"""

from __future__ import annotations

from typing import Any

import httpx

from credit_passport.config.settings import Settings
from credit_passport.core.exceptions import ExtractionParseError, TransportError
from credit_passport.passport_logging import get_logger

logger = get_logger(__name__)

_ERROR_BODY_LIMIT = 2000


def build_generate_content_body(prompt: str) -> dict[str, Any]:
    """Single-turn request body: one text part, JSON-only response."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt},
                ],
            },
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
        },
    }


def candidate_text(data: Any) -> str | None:
    """candidates[0].content.parts[0].text, or None when any level is missing."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return None
    parts = content.get("parts") or []
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class GeminiClient:
    """
    Minimal Gemini text-generation client.

    The API key is checked at construction so a missing credential is a
    ConfigurationError before any request is attempted. Pass http_client to
    share a connection pool or to inject a mock transport.
    """

    def __init__(self, settings: Settings, *, http_client: httpx.Client | None = None) -> None:
        self._api_key = settings.require_gemini_api_key()
        self._url = f"{settings.gemini_api_base.rstrip('/')}/models/{settings.gemini_model}:generateContent"
        self._model = settings.gemini_model
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=settings.http_timeout_sec)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def generate(self, prompt: str) -> str:
        """Send prompt; return the first candidate's text."""
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }
        try:
            resp = self._client.post(self._url, json=build_generate_content_body(prompt), headers=headers)
        except httpx.HTTPError as e:
            logger.warning("gemini_request_failed", model=self._model, error=type(e).__name__)
            raise TransportError(f"Gemini request failed: {e}") from e

        if not resp.is_success:
            body = resp.text[:_ERROR_BODY_LIMIT]
            logger.warning("gemini_error_response", model=self._model, status=resp.status_code)
            raise TransportError("Gemini API error", status_code=resp.status_code, body=body)

        try:
            data = resp.json()
        except ValueError as e:
            raise ExtractionParseError("Gemini response body is not JSON", raw_text=resp.text) from e
        text = candidate_text(data)
        if text is None:
            raise ExtractionParseError("Gemini response has no candidate text", raw_text=resp.text)
        logger.info("gemini_response_received", model=self._model, chars=len(text))
        return text
