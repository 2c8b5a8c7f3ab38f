from __future__ import annotations

"""
Explicit session object tying recognition, translation, playback and history.

Design intent:
- Own exactly one TranscriptAccumulator; no module-level session state.
- Convert every per-operation failure into a Notice instead of raising.
- Keep presentation out: consumers subscribe to snapshots and notices.
"""

import asyncio
import datetime as _dt
import logging
from typing import Callable, List, Optional, Set, Tuple

from ..asr.models import UtteranceChunk
from ..internal_core.asr.base import RecognitionEngine
from ..internal_core.asr.controller import RecognitionSessionController
from ..internal_core.config import TranslatorConfig
from ..internal_core.contracts import HealthStatus, Notice, NoticeLevel, SessionMetadata, SessionRecord
from ..internal_core.errors import (
    EngineError,
    EngineUnavailable,
    EmptyInput,
    IncompleteSession,
    MedTranslateError,
    NothingToSpeak,
    TranslationFailed,
)
from ..internal_core.health import HealthProbe
from ..internal_core.notices import make_notice
from ..internal_core.session_ledger import InMemorySessionLedger
from ..internal_core.tts.base import SynthesisEngine
from ..internal_core.tts.playback import SpeechPlaybackController
from ..languages import DEFAULT_INPUT_LANGUAGE, DEFAULT_OUTPUT_LANGUAGE, speaker_labels
from ..translation.backend import TranslationBackend
from ..translation.dispatcher import TranslationDispatcher
from ..translation.gemini import GeminiTranslationBackend
from ..translation.service_client import TranslationServiceClient
from .transcript import TranscriptAccumulator

logger = logging.getLogger(__name__)

NoticeHandler = Callable[[Notice], None]


def format_time(seconds: float) -> str:
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


class SessionPipeline:
    def __init__(
        self,
        *,
        transcript: TranscriptAccumulator,
        recognition_engine: Optional[RecognitionEngine],
        dispatcher: TranslationDispatcher,
        playback: SpeechPlaybackController,
        ledger: Optional[InMemorySessionLedger] = None,
        service: Optional[TranslationServiceClient] = None,
        health_probe: Optional[HealthProbe] = None,
        input_language: str = DEFAULT_INPUT_LANGUAGE,
        output_language: str = DEFAULT_OUTPUT_LANGUAGE,
        medical: bool = True,
        on_notice: Optional[NoticeHandler] = None,
    ) -> None:
        if ledger is None and service is None:
            raise ValueError("SessionPipeline needs a ledger or a service client to save sessions")
        self.transcript = transcript
        self.dispatcher = dispatcher
        self.playback = playback
        self.ledger = ledger
        self.service = service
        self.health_probe = health_probe
        self.input_language = input_language
        self.output_language = output_language
        self.medical = medical
        self.notices: List[Notice] = []
        self._on_notice = on_notice
        self._pending: Set[asyncio.Task] = set()
        self.recognizer = RecognitionSessionController(
            recognition_engine,
            on_chunk=self._handle_chunk,
            on_error=self._handle_engine_error,
            on_recording_started=transcript.mark_recording_started,
            on_recording_stopped=transcript.mark_recording_stopped,
        )

    # -- notifications -------------------------------------------------

    def _notify(self, level: NoticeLevel, title: str, detail: str = "") -> Notice:
        notice = make_notice(level, title, detail)
        self.notices.append(notice)
        if self._on_notice is not None:
            self._on_notice(notice)
        return notice

    # -- recognition ---------------------------------------------------

    def start_recording(self) -> bool:
        try:
            self.recognizer.start(self.input_language)
        except EngineUnavailable as exc:
            self._notify(
                "error",
                "Speech Recognition Unavailable",
                exc.message,
            )
            return False
        return True

    def stop_recording(self) -> None:
        self.recognizer.stop()

    def _handle_chunk(self, chunk: UtteranceChunk) -> None:
        if not self.transcript.append_original(chunk.text):
            return
        # Bind the chunk to the session and language pair it was spoken in.
        task = asyncio.get_running_loop().create_task(
            self._translate_chunk(
                chunk.text,
                self.input_language,
                self.output_language,
                self.medical,
                self.transcript.epoch,
            )
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _translate_chunk(
        self,
        text: str,
        input_language: str,
        output_language: str,
        medical: bool,
        epoch: int,
    ) -> None:
        try:
            await self.dispatcher.translate(
                text, input_language, output_language, medical, epoch=epoch
            )
        except EmptyInput:
            return
        except TranslationFailed as exc:
            logger.warning("translation failed code=%s cause=%s", exc.code, exc.cause)
            self._notify("error", "Translation Error", exc.message)

    def _handle_engine_error(self, error: EngineError) -> None:
        self._notify("error", "Speech Recognition Error", error.message)

    async def drain(self) -> None:
        """Wait for every translation still in flight."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -- playback ------------------------------------------------------

    def speak_translation(self) -> Optional[asyncio.Task]:
        try:
            return self.playback.speak(self.transcript.translated_text, self.output_language)
        except NothingToSpeak as exc:
            self._notify("error", "No Text to Speak", exc.message)
        except EngineUnavailable as exc:
            self._notify("error", "Text-to-Speech Unavailable", exc.message)
        return None

    # -- session lifecycle ---------------------------------------------

    def _metadata(self) -> SessionMetadata:
        return SessionMetadata(
            sessionDuration=int(self.transcript.session_elapsed_sec()),
            wordsTranslated=self.transcript.words_translated,
            timestamp=_dt.datetime.now(_dt.timezone.utc).isoformat(),
        )

    async def save_session(self) -> Optional[SessionRecord]:
        snap = self.transcript.snapshot()
        if not snap.original_text.strip() or not snap.translated_text.strip():
            self._notify("error", "Nothing to Save", "Please record and translate some text first.")
            return None

        try:
            if self.ledger is not None:
                record = self.ledger.save(
                    snap.original_text,
                    snap.translated_text,
                    self.input_language,
                    self.output_language,
                    self._metadata(),
                )
            elif self.service is not None:
                record = await self.service.save_session(
                    original_text=snap.original_text,
                    translated_text=snap.translated_text,
                    input_language=self.input_language,
                    output_language=self.output_language,
                    metadata=self._metadata(),
                )
            else:
                raise MedTranslateError("No session store configured", code="SAVE_FAILED")
        except IncompleteSession:
            self._notify("error", "Nothing to Save", "Please record and translate some text first.")
            return None
        except MedTranslateError as exc:
            logger.warning("session save failed: %s", exc.message)
            self._notify("error", "Save Failed", "Could not save session. Please try again.")
            return None

        self._notify("success", "Session Saved", "Your translation session has been saved successfully.")
        return record

    def new_session(self) -> int:
        self.recognizer.stop()
        epoch = self.transcript.reset()
        self._notify("info", "New Session Started", "Ready for a new translation session.")
        return epoch

    def clear_original(self) -> None:
        self.transcript.clear_original()

    def clear_translated(self) -> None:
        self.transcript.clear_translated()

    def set_languages(self, input_language: str, output_language: str) -> None:
        # Recognition picks up the new locale on its next start.
        self.input_language = input_language
        self.output_language = output_language

    def speaker_labels(self) -> Tuple[str, str]:
        return speaker_labels(self.input_language, self.output_language)

    def elapsed_labels(self) -> Tuple[str, str]:
        return (
            format_time(self.transcript.session_elapsed_sec()),
            format_time(self.transcript.recording_elapsed_sec()),
        )

    async def aclose(self) -> None:
        await self.recognizer.cancel()
        self.playback.cancel()
        if self.health_probe is not None:
            await self.health_probe.stop()
        await self.drain()

    # -- health --------------------------------------------------------

    def start_health_monitoring(self) -> None:
        if self.health_probe is not None:
            self.health_probe.start()

    @property
    def health_status(self) -> HealthStatus:
        if self.health_probe is None:
            return "unknown"
        return self.health_probe.status


def build_pipeline(
    config: TranslatorConfig,
    *,
    recognition_engine: Optional[RecognitionEngine],
    synthesis_engine: Optional[SynthesisEngine],
    backend: Optional[TranslationBackend] = None,
    service: Optional[TranslationServiceClient] = None,
    input_language: str = DEFAULT_INPUT_LANGUAGE,
    output_language: str = DEFAULT_OUTPUT_LANGUAGE,
    on_notice: Optional[NoticeHandler] = None,
) -> SessionPipeline:
    """Wire a pipeline from configuration.

    With a `service` client the pipeline translates and saves through the
    HTTP service; otherwise it calls Gemini directly and keeps a local ledger.
    """
    if backend is None:
        backend = service or GeminiTranslationBackend(
            config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            base_url=config.GEMINI_BASE_URL,
            timeout_sec=config.MEDTRANSLATE_HTTP_TIMEOUT_SEC,
        )
    ledger = None
    if service is None:
        ledger = InMemorySessionLedger(
            capacity=config.MEDTRANSLATE_LEDGER_CAPACITY,
            list_limit=config.MEDTRANSLATE_LEDGER_LIST_LIMIT,
        )

    transcript = TranscriptAccumulator()
    return SessionPipeline(
        transcript=transcript,
        recognition_engine=recognition_engine,
        dispatcher=TranslationDispatcher(backend, transcript),
        playback=SpeechPlaybackController(
            synthesis_engine,
            rate=config.MEDTRANSLATE_SPEECH_RATE,
            pitch=config.MEDTRANSLATE_SPEECH_PITCH,
        ),
        ledger=ledger,
        service=service,
        health_probe=HealthProbe(backend.ping, interval_sec=config.MEDTRANSLATE_HEALTH_INTERVAL_SEC),
        input_language=input_language,
        output_language=output_language,
        medical=config.MEDTRANSLATE_MEDICAL_MODE,
        on_notice=on_notice,
    )
