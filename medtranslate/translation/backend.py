from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Tuple

from ..internal_core.contracts import TranslationResult
from ..internal_core.errors import TranslationFailed

DEFAULT_CONFIDENCE = 0.85

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", flags=re.IGNORECASE)


class TranslationBackend(ABC):
    @abstractmethod
    async def translate(
        self,
        text: str,
        *,
        input_language: str,
        output_language: str,
        medical: bool = True,
    ) -> TranslationResult: ...

    @abstractmethod
    async def ping(self) -> None: ...

    @abstractmethod
    def name(self) -> str: ...


def count_words(text: str) -> int:
    return len((text or "").split())


def parse_translation_payload(payload: Any, source_text: str) -> Tuple[str, float]:
    """Return (translated_text, confidence) from a model reply.

    A reply that is missing fields degrades to echoing `source_text` with the
    default confidence. A reply that is not decodable JSON at all is a failure.
    """
    if payload is None:
        return source_text, DEFAULT_CONFIDENCE

    data: Any = payload
    if isinstance(payload, (str, bytes)):
        raw = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
        raw = _FENCE_RE.sub("", raw.strip())
        if not raw:
            return source_text, DEFAULT_CONFIDENCE
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TranslationFailed(f"Malformed translation payload: {exc}") from exc

    if not isinstance(data, dict):
        return source_text, DEFAULT_CONFIDENCE

    translated = data.get("translatedText")
    if not isinstance(translated, str) or not translated.strip():
        translated = source_text

    confidence = data.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        confidence = DEFAULT_CONFIDENCE
    elif not 0.0 < float(confidence) <= 1.0:
        confidence = DEFAULT_CONFIDENCE

    return translated.strip(), float(confidence)
