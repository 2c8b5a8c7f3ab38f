import asyncio

import httpx
import pytest

from medtranslate.api.main import app
from medtranslate.internal_core.contracts import SessionMetadata, TranslationResult
from medtranslate.internal_core.config import load_config
from medtranslate.internal_core.errors import (
    AuthFailure,
    EmptyInput,
    IncompleteSession,
    MedTranslateError,
    TranslationFailed,
)
from medtranslate.internal_core.session_ledger import InMemorySessionLedger
from medtranslate.session.pipeline import build_pipeline
from medtranslate.translation.backend import TranslationBackend
from medtranslate.translation.service_client import TranslationServiceClient


class FakeBackend(TranslationBackend):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    async def translate(self, text, *, input_language, output_language, medical=True):
        if self.error is not None:
            raise self.error
        return TranslationResult(translatedText=f"[{output_language}] {text}", confidence=0.9)

    async def ping(self) -> None:
        if self.error is not None:
            raise self.error

    def name(self) -> str:
        return "fake"


def _client() -> TranslationServiceClient:
    return TranslationServiceClient("http://testserver", transport=httpx.ASGITransport(app=app))


def _with_backend(backend: TranslationBackend):
    app.state.translation_backend = backend
    app.state.session_ledger = InMemorySessionLedger()


def _clear_injected_state() -> None:
    for name in ("translation_backend", "session_ledger"):
        if hasattr(app.state, name):
            delattr(app.state, name)


def test_client_translates_saves_and_lists_through_the_service() -> None:
    _with_backend(FakeBackend())
    client = _client()

    async def run():
        result = await client.translate("hola", input_language="es-ES", output_language="en-US")
        record = await client.save_session(
            original_text="hola",
            translated_text=result.translatedText,
            input_language="es-ES",
            output_language="en-US",
            metadata=SessionMetadata(sessionDuration=5, wordsTranslated=2),
        )
        listed = await client.list_sessions()
        health = await client.health()
        return result, record, listed, health

    try:
        result, record, listed, health = asyncio.run(run())
    finally:
        _clear_injected_state()

    assert result.translatedText == "[en-US] hola"
    assert [r.id for r in listed] == [record.id]
    assert health.translationApi == "connected"


def test_client_maps_service_errors_back_to_core_errors() -> None:
    _with_backend(FakeBackend(error=AuthFailure("API_KEY_INVALID")))
    client = _client()

    try:
        with pytest.raises(AuthFailure):
            asyncio.run(client.translate("hola", input_language="es-ES", output_language="en-US"))
        with pytest.raises(EmptyInput):
            asyncio.run(client.translate(" ", input_language="es-ES", output_language="en-US"))
        with pytest.raises(IncompleteSession):
            asyncio.run(
                client.save_session(
                    original_text="hi",
                    translated_text="",
                    input_language="en-US",
                    output_language="es-ES",
                    metadata=SessionMetadata(),
                )
            )
        with pytest.raises(TranslationFailed) as excinfo:
            asyncio.run(client.ping())
    finally:
        _clear_injected_state()

    assert excinfo.value.cause == "API_KEY_INVALID"


def test_unreachable_service_is_a_translation_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = TranslationServiceClient("http://offline", transport=httpx.MockTransport(handler))
    with pytest.raises(TranslationFailed):
        asyncio.run(client.translate("hola", input_language="es-ES", output_language="en-US"))


def _html_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    return httpx.MockTransport(handler)


def test_malformed_session_replies_raise_save_and_list_failures() -> None:
    client = TranslationServiceClient("http://proxy", transport=_html_transport())

    with pytest.raises(MedTranslateError) as saved:
        asyncio.run(
            client.save_session(
                original_text="hola",
                translated_text="hello",
                input_language="es-ES",
                output_language="en-US",
                metadata=SessionMetadata(),
            )
        )
    with pytest.raises(MedTranslateError) as listed:
        asyncio.run(client.list_sessions())

    assert saved.value.code == "SAVE_FAILED"
    assert listed.value.code == "LIST_FAILED"


def test_pipeline_reports_malformed_save_reply_as_notice() -> None:
    service = TranslationServiceClient("http://proxy", transport=_html_transport())
    pipeline = build_pipeline(
        load_config(),
        recognition_engine=None,
        synthesis_engine=None,
        backend=FakeBackend(),
        service=service,
    )
    pipeline.transcript.append_original("hola")
    pipeline.transcript.append_translated(" hello")

    assert asyncio.run(pipeline.save_session()) is None
    assert pipeline.notices[-1].title == "Save Failed"
    assert pipeline.notices[-1].detail == "Could not save session. Please try again."
