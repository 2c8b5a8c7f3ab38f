from __future__ import annotations

"""
HTTP surface for the medtranslate service.

Design intent:
- Keep endpoints thin: validation here, translation and history in core modules.
- Return `{message}` bodies on failure so clients can show them verbatim.
- Allow tests to inject the backend and ledger through `app.state`.
"""

import logging
import time
from datetime import datetime, timezone

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medtranslate.internal_core.config import TranslatorConfig, load_config, require_api_key
from medtranslate.internal_core.contracts import (
    ErrorBody,
    HealthReport,
    SessionRecord,
    SessionSaveRequest,
    TranslateRequest,
    TranslationResult,
)
from medtranslate.internal_core.errors import (
    EmptyInput,
    IncompleteSession,
    MissingCredential,
    TranslationFailed,
)
from medtranslate.internal_core.session_ledger import InMemorySessionLedger
from medtranslate.translation.backend import TranslationBackend
from medtranslate.translation.gemini import GeminiTranslationBackend

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = FastAPI(title="medtranslate service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_config() -> TranslatorConfig:
    existing = getattr(app.state, "config", None)
    if isinstance(existing, TranslatorConfig):
        return existing
    created = load_config()
    setattr(app.state, "config", created)
    return created


def _get_translation_backend() -> TranslationBackend:
    existing = getattr(app.state, "translation_backend", None)
    if isinstance(existing, TranslationBackend):
        return existing
    config = _get_config()
    created = GeminiTranslationBackend(
        config.GEMINI_API_KEY,
        model=config.GEMINI_MODEL,
        base_url=config.GEMINI_BASE_URL,
        timeout_sec=config.MEDTRANSLATE_HTTP_TIMEOUT_SEC,
    )
    setattr(app.state, "translation_backend", created)
    return created


def _get_session_ledger() -> InMemorySessionLedger:
    existing = getattr(app.state, "session_ledger", None)
    if isinstance(existing, InMemorySessionLedger):
        return existing
    config = _get_config()
    created = InMemorySessionLedger(
        capacity=config.MEDTRANSLATE_LEDGER_CAPACITY,
        list_limit=config.MEDTRANSLATE_LEDGER_LIST_LIMIT,
    )
    setattr(app.state, "session_ledger", created)
    return created


def _message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorBody(message=message).model_dump())


_ERROR_RESPONSES = {400: {"model": ErrorBody}, 500: {"model": ErrorBody}}


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/translate", response_model=TranslationResult, responses=_ERROR_RESPONSES)
async def translate(payload: TranslateRequest):
    if not payload.text.strip():
        return _message_response(400, EmptyInput.default_message)

    backend = _get_translation_backend()
    started = time.perf_counter()
    try:
        result = await backend.translate(
            payload.text,
            input_language=payload.inputLanguage,
            output_language=payload.outputLanguage,
            medical=payload.isMedical,
        )
    except TranslationFailed as exc:
        logger.error("translation error code=%s cause=%s", exc.code, exc.cause)
        return _message_response(500, exc.message)

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    return result.model_copy(update={"processingTime": elapsed_ms})


@app.post("/api/sessions", response_model=SessionRecord, responses=_ERROR_RESPONSES)
async def save_session(payload: SessionSaveRequest):
    ledger = _get_session_ledger()
    try:
        return ledger.save(
            payload.originalText,
            payload.translatedText,
            payload.inputLanguage,
            payload.outputLanguage,
            payload.metadata,
        )
    except IncompleteSession as exc:
        return _message_response(400, exc.message)
    except ValueError:
        logger.exception("session save failed")
        return _message_response(500, "Failed to save session")


@app.get("/api/sessions", response_model=list[SessionRecord])
async def list_sessions() -> list[SessionRecord]:
    return _get_session_ledger().list()


@app.get("/api/health", response_model=HealthReport, response_model_exclude_none=True)
async def health():
    backend = _get_translation_backend()
    try:
        await backend.ping()
    except TranslationFailed as exc:
        logger.warning("health check failed: %s", exc.cause or exc.message)
        report = HealthReport(
            status="degraded",
            translationApi="disconnected",
            error=exc.cause or exc.message,
            timestamp=_utc_now_iso(),
        )
        return JSONResponse(status_code=503, content=report.model_dump(exclude_none=True))
    return HealthReport(status="healthy", translationApi="connected", timestamp=_utc_now_iso())


def main() -> None:
    load_dotenv()
    config = load_config()
    logging.basicConfig(level=config.MEDTRANSLATE_LOG_LEVEL.upper(), format=LOG_FORMAT)
    try:
        require_api_key(config)
    except MissingCredential as exc:
        logger.error("%s", exc.message)
        raise SystemExit(1) from exc

    app.state.config = config
    _get_translation_backend()
    _get_session_ledger()
    logger.info(
        "medtranslate listening on %s:%d model=%s",
        config.MEDTRANSLATE_HOST,
        config.PORT,
        config.GEMINI_MODEL,
    )
    uvicorn.run(app, host=config.MEDTRANSLATE_HOST, port=config.PORT, log_level="info")


if __name__ == "__main__":
    main()
