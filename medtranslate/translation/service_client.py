from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from ..internal_core.contracts import (
    HealthReport,
    SessionMetadata,
    SessionRecord,
    SessionSaveRequest,
    TranslateRequest,
    TranslationResult,
)
from ..internal_core.errors import (
    AuthFailure,
    EmptyInput,
    IncompleteSession,
    MedTranslateError,
    QuotaExceeded,
    TranslationFailed,
)
from .backend import TranslationBackend

logger = logging.getLogger(__name__)


def _message_of(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or "")
    return ""


class TranslationServiceClient(TranslationBackend):
    """Async client for the medtranslate HTTP service (`/api/*`)."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_sec: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_sec, connect=10.0)
        self._transport = transport

    def name(self) -> str:
        return f"service:{self._base_url}"

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                return await client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise TranslationFailed(f"{exc.__class__.__name__}: {exc}") from exc

    async def translate(
        self,
        text: str,
        *,
        input_language: str,
        output_language: str,
        medical: bool = True,
    ) -> TranslationResult:
        body = TranslateRequest(
            text=text,
            inputLanguage=input_language,
            outputLanguage=output_language,
            isMedical=medical,
        )
        r = await self._request("POST", "/api/translate", json=body.model_dump())
        if r.status_code == 400:
            raise EmptyInput(_message_of(r) or None)
        if r.status_code >= 400:
            message = _message_of(r)
            if message == AuthFailure.default_message:
                raise AuthFailure(message)
            if message == QuotaExceeded.default_message:
                raise QuotaExceeded(message)
            raise TranslationFailed(message or f"HTTP {r.status_code}")
        try:
            return TranslationResult.model_validate(r.json())
        except ValueError as exc:
            raise TranslationFailed(f"Malformed translation response: {exc}") from exc

    async def save_session(
        self,
        *,
        original_text: str,
        translated_text: str,
        input_language: str,
        output_language: str,
        metadata: SessionMetadata,
    ) -> SessionRecord:
        body = SessionSaveRequest(
            originalText=original_text,
            translatedText=translated_text,
            inputLanguage=input_language,
            outputLanguage=output_language,
            metadata=metadata,
        )
        r = await self._request("POST", "/api/sessions", json=body.model_dump())
        if r.status_code == 400:
            raise IncompleteSession(_message_of(r) or None)
        if r.status_code >= 400:
            raise MedTranslateError(_message_of(r) or "Failed to save session", code="SAVE_FAILED")
        try:
            return SessionRecord.model_validate(r.json())
        except ValueError as exc:
            raise MedTranslateError(f"Malformed session response: {exc}", code="SAVE_FAILED") from exc

    async def list_sessions(self) -> List[SessionRecord]:
        r = await self._request("GET", "/api/sessions")
        if r.status_code >= 400:
            raise MedTranslateError(_message_of(r) or "Failed to load sessions", code="LIST_FAILED")
        try:
            return [SessionRecord.model_validate(item) for item in r.json()]
        except (TypeError, ValueError) as exc:
            raise MedTranslateError(f"Malformed session list: {exc}", code="LIST_FAILED") from exc

    async def health(self) -> HealthReport:
        r = await self._request("GET", "/api/health")
        try:
            return HealthReport.model_validate(r.json())
        except ValueError as exc:
            raise TranslationFailed(f"Malformed health response (HTTP {r.status_code})") from exc

    async def ping(self) -> None:
        report = await self.health()
        if report.translationApi != "connected":
            raise TranslationFailed(report.error or "translation backend disconnected")
