from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from ..contracts import PlaybackStatus
from ..errors import EngineUnavailable, NothingToSpeak
from .base import SynthesisEngine, Utterance

logger = logging.getLogger(__name__)


class SpeechPlaybackController:
    def __init__(
        self,
        engine: Optional[SynthesisEngine],
        *,
        rate: float = 0.9,
        pitch: float = 1.0,
        on_status: Optional[Callable[[PlaybackStatus], None]] = None,
    ) -> None:
        self._engine = engine
        self._rate = rate
        self._pitch = pitch
        self._on_status = on_status
        self._task: Optional[asyncio.Task] = None
        self._unavailable_logged = False
        self.status: PlaybackStatus = "idle"

    @property
    def available(self) -> bool:
        return self._engine is not None

    def speak(self, text: str, output_language: str) -> asyncio.Task:
        """Start speaking `text`, replacing whatever is currently playing."""
        if not (text or "").strip():
            raise NothingToSpeak()
        engine = self._engine
        if engine is None:
            if not self._unavailable_logged:
                logger.warning("speech synthesis unavailable: no engine configured")
                self._unavailable_logged = True
            raise EngineUnavailable(
                "speech synthesis",
                "Text-to-speech is not supported in this environment.",
            )

        self.cancel()
        utterance = Utterance(text=text, lang=output_language, rate=self._rate, pitch=self._pitch)
        task = asyncio.get_running_loop().create_task(self._play(engine, utterance))
        self._task = task
        return task

    def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            if self._engine is not None:
                self._engine.cancel()
        self._set_status("idle")

    async def _play(self, engine: SynthesisEngine, utterance: Utterance) -> None:
        try:
            async for event in engine.play(utterance):
                if event == "start":
                    self._set_status("speaking")
                elif event == "end":
                    break
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("speech synthesis failed engine=%s: %s", engine.name(), exc)
        finally:
            if self._task is asyncio.current_task():
                self._task = None
                self._set_status("idle")

    def _set_status(self, status: PlaybackStatus) -> None:
        if status == self.status:
            return
        self.status = status
        if self._on_status is not None:
            self._on_status(status)
