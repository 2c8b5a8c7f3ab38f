import asyncio
import json

import httpx
import pytest

from medtranslate.internal_core.errors import AuthFailure, QuotaExceeded, TranslationFailed
from medtranslate.translation.backend import parse_translation_payload
from medtranslate.translation.gemini import GeminiTranslationBackend


def _reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def _backend(handler) -> GeminiTranslationBackend:
    return GeminiTranslationBackend(
        "test-key",
        model="gemini-2.5-flash",
        base_url="https://gemini.test/v1beta",
        transport=httpx.MockTransport(handler),
    )


def test_translate_posts_generate_content_with_json_mime_type() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_reply('{"translatedText": "hello", "confidence": 0.95}'))

    result = asyncio.run(
        _backend(handler).translate("hola", input_language="es-ES", output_language="en-US", medical=True)
    )

    assert result.translatedText == "hello"
    assert result.confidence == 0.95
    assert seen["url"] == "https://gemini.test/v1beta/models/gemini-2.5-flash:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["generationConfig"] == {"responseMimeType": "application/json"}
    prompt = seen["body"]["contents"][0]["parts"][0]["text"]
    assert "professional medical translator" in prompt
    assert "Spanish (es-ES)" in prompt and '"hola"' in prompt


def test_generic_prompt_is_used_without_medical_hint() -> None:
    prompts = []

    def handler(request: httpx.Request) -> httpx.Response:
        prompts.append(json.loads(request.content)["contents"][0]["parts"][0]["text"])
        return httpx.Response(200, json=_reply('{"translatedText": "bonjour"}'))

    result = asyncio.run(
        _backend(handler).translate("hello", input_language="en-US", output_language="fr-FR", medical=False)
    )

    assert prompts[0].startswith("Translate accurately from English (US) (en-US) to French (fr-FR)")
    assert result.confidence == 0.85


def test_missing_candidate_text_echoes_source() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": []})

    result = asyncio.run(
        _backend(handler).translate("fiebre", input_language="es-ES", output_language="en-US")
    )
    assert result.translatedText == "fiebre"
    assert result.confidence == 0.85


@pytest.mark.parametrize(
    ("status", "body", "expected"),
    [
        (
            400,
            {"error": {"message": "API key not valid.", "status": "INVALID_ARGUMENT", "details": [{"reason": "API_KEY_INVALID"}]}},
            AuthFailure,
        ),
        (429, {"error": {"message": "You exceeded your current quota.", "status": "RESOURCE_EXHAUSTED"}}, QuotaExceeded),
        (500, {"error": {"message": "Internal error", "status": "INTERNAL"}}, TranslationFailed),
    ],
)
def test_http_errors_are_classified(status, body, expected) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    with pytest.raises(expected) as excinfo:
        asyncio.run(_backend(handler).translate("hola", input_language="es-ES", output_language="en-US"))
    assert type(excinfo.value) is expected
    assert excinfo.value.message == expected.default_message


def test_transport_errors_become_translation_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TranslationFailed) as excinfo:
        asyncio.run(_backend(handler).ping())
    assert "ConnectError" in excinfo.value.cause


def test_ping_sends_hello_without_json_config() -> None:
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_reply("Hi there"))

    asyncio.run(_backend(handler).ping())
    assert bodies == [{"contents": [{"parts": [{"text": "Hello"}]}]}]


def test_parse_translation_payload_fallbacks() -> None:
    assert parse_translation_payload(None, "src") == ("src", 0.85)
    assert parse_translation_payload('{"confidence": 0.4}', "src") == ("src", 0.4)
    assert parse_translation_payload('["not", "an", "object"]', "src") == ("src", 0.85)
    assert parse_translation_payload('```json\n{"translatedText": "ok", "confidence": 2}\n```', "src") == ("ok", 0.85)
    assert parse_translation_payload({"translatedText": " hi ", "confidence": 0.7}, "src") == ("hi", 0.7)
    with pytest.raises(TranslationFailed):
        parse_translation_payload("not json at all", "src")
