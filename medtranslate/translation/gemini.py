from __future__ import annotations

"""
Gemini `generateContent` adapter used as the translation backend.

Design intent:
- One request per call; no retries, timeouts come from httpx.
- Classify auth and quota failures so callers can show a specific message.
"""

import logging
import time
from typing import Any, Optional

import httpx

from ..internal_core.contracts import TranslationResult
from ..internal_core.errors import TranslationFailed, classify_backend_failure
from .backend import TranslationBackend, parse_translation_payload
from .prompts import build_translation_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        parts = [str(error.get("status") or ""), str(error.get("message") or "")]
        for item in error.get("details") or []:
            if isinstance(item, dict) and item.get("reason"):
                parts.append(str(item["reason"]))
        detail = " ".join(p for p in parts if p).strip()
        if detail:
            return detail
    return f"HTTP {response.status_code}"


def extract_candidate_text(data: Any) -> Optional[str]:
    """Pull the first text part out of a generateContent reply, if any."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if not parts:
        return None
    texts = [p.get("text") for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    if not texts:
        return None
    return "".join(texts)


class GeminiTranslationBackend(TranslationBackend):
    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout_sec: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_sec, connect=10.0)
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    def name(self) -> str:
        return f"gemini:{self._model}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def _generate(self, prompt: str, *, json_response: bool) -> Any:
        payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if json_response:
            payload["generationConfig"] = {"responseMimeType": "application/json"}
        headers = {"Content-Type": "application/json", "x-goog-api-key": self._api_key}
        url = f"{self._base_url}/models/{self._model}:generateContent"

        try:
            async with self._client() as client:
                r = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise TranslationFailed(f"{exc.__class__.__name__}: {exc}") from exc

        if r.status_code >= 400:
            raise classify_backend_failure(_error_detail(r), r.status_code)
        try:
            return r.json()
        except ValueError as exc:
            raise TranslationFailed("Translation backend returned a non-JSON body") from exc

    async def translate(
        self,
        text: str,
        *,
        input_language: str,
        output_language: str,
        medical: bool = True,
    ) -> TranslationResult:
        started = time.perf_counter()
        prompt = build_translation_prompt(text, input_language, output_language, medical=medical)
        data = await self._generate(prompt, json_response=True)
        translated, confidence = parse_translation_payload(extract_candidate_text(data), text)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "translated %s->%s chars=%d medical=%s in %dms",
            input_language,
            output_language,
            len(text),
            medical,
            elapsed_ms,
        )
        return TranslationResult(
            translatedText=translated,
            confidence=confidence,
            processingTime=elapsed_ms,
        )

    async def ping(self) -> None:
        await self._generate("Hello", json_response=False)
