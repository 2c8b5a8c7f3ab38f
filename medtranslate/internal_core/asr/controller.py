from __future__ import annotations

import asyncio
import logging
import time
from typing import AsyncIterator, Callable, List, Optional, Sequence

from ...asr.models import RecognitionEvent, RecognitionResult, UtteranceChunk
from ..contracts import RecordingStatus
from ..errors import EngineError, EngineUnavailable
from .base import RecognitionEngine

logger = logging.getLogger(__name__)

ChunkHandler = Callable[[UtteranceChunk], None]
ErrorHandler = Callable[[EngineError], None]
StatusHandler = Callable[[RecordingStatus], None]


def finalize_results(result_index: int, results: Sequence[RecognitionResult]) -> str:
    """Join the final transcripts of a batch, starting at `result_index`."""
    parts: List[str] = []
    for result in results[max(0, result_index) :]:
        if result.is_final and result.transcript:
            parts.append(result.transcript)
    return " ".join(parts).strip()


class RecognitionSessionController:
    def __init__(
        self,
        engine: Optional[RecognitionEngine],
        *,
        on_chunk: ChunkHandler,
        on_error: Optional[ErrorHandler] = None,
        on_status: Optional[StatusHandler] = None,
        on_recording_started: Optional[Callable[[], None]] = None,
        on_recording_stopped: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._engine = engine
        self._on_chunk = on_chunk
        self._on_error = on_error
        self._on_status = on_status
        self._on_recording_started = on_recording_started
        self._on_recording_stopped = on_recording_stopped
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._unavailable_logged = False
        self._chunk_count = 0
        self.status: RecordingStatus = "idle"
        self.locale: Optional[str] = None

    @property
    def available(self) -> bool:
        return self._engine is not None

    @property
    def recording(self) -> bool:
        return self.status == "recording"

    def start(self, locale: str) -> None:
        if self._engine is None:
            if not self._unavailable_logged:
                logger.warning("speech recognition unavailable: no engine configured")
                self._unavailable_logged = True
            raise EngineUnavailable(
                "speech recognition",
                "Speech recognition is not supported in this environment.",
            )
        if self.recording:
            return
        self.locale = locale
        self._set_status("recording")
        if self._on_recording_started is not None:
            self._on_recording_started()
        logger.info("recognition started engine=%s locale=%s", self._engine.name(), locale)
        events = self._engine.stream(locale, continuous=True, interim_results=True)
        self._task = asyncio.get_running_loop().create_task(self._consume(self._engine, events))

    def stop(self) -> None:
        if not self.recording or self._engine is None:
            return
        self._engine.request_stop()

    async def wait_closed(self) -> None:
        task = self._task
        if task is not None:
            await task

    async def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        if self.recording:
            self._finish()

    async def _consume(
        self, engine: RecognitionEngine, events: AsyncIterator[RecognitionEvent]
    ) -> None:
        try:
            async for event in events:
                if event.kind == "results":
                    self._handle_batch(event)
                elif event.kind == "error":
                    self._fail(event.reason or "unknown", engine.name())
                    return
                elif event.kind == "end":
                    break
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._fail(str(exc) or exc.__class__.__name__, engine.name())
            return
        self._finish()

    def _handle_batch(self, event: RecognitionEvent) -> None:
        text = finalize_results(event.result_index, event.results)
        if not text:
            return
        chunk = UtteranceChunk(text=text, index=self._chunk_count, created_at=self._clock())
        self._chunk_count += 1
        logger.debug("chunk %d finalized (%d chars)", chunk.index, len(text))
        self._on_chunk(chunk)

    def _fail(self, reason: str, engine_name: str) -> None:
        logger.warning("recognition error engine=%s reason=%s", engine_name, reason)
        self._set_status("error")
        if self._on_recording_stopped is not None:
            self._on_recording_stopped()
        if self._on_error is not None:
            self._on_error(EngineError(reason, engine_name))

    def _finish(self) -> None:
        self._set_status("idle")
        if self._on_recording_stopped is not None:
            self._on_recording_stopped()
        logger.info("recognition ended")

    def _set_status(self, status: RecordingStatus) -> None:
        if status == self.status:
            return
        self.status = status
        if self._on_status is not None:
            self._on_status(status)
