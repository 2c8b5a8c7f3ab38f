from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterable, List, Optional

from ...asr.models import RecognitionEvent
from .base import RecognitionEngine


class ScriptedRecognitionEngine(RecognitionEngine):
    """Replays a fixed list of events for each start.

    A stop request lets one more queued event through and then ends the
    stream, the way a browser recognizer flushes its last batch.
    """

    def __init__(
        self,
        events: Iterable[RecognitionEvent] = (),
        *,
        delay_sec: float = 0.0,
        emit_end: bool = True,
        raise_after: Optional[Exception] = None,
    ) -> None:
        self._events: List[RecognitionEvent] = list(events)
        self._delay_sec = delay_sec
        self._emit_end = emit_end
        self._raise_after = raise_after
        self._stop_requested = False
        self.locales: List[str] = []
        self.stop_calls = 0

    def stream(
        self, locale: str, *, continuous: bool = True, interim_results: bool = True
    ) -> AsyncIterator[RecognitionEvent]:
        self.locales.append(locale)
        self._stop_requested = False
        return self._replay()

    async def _replay(self) -> AsyncIterator[RecognitionEvent]:
        yield RecognitionEvent.started()
        flushed_after_stop = False
        for event in self._events:
            await asyncio.sleep(self._delay_sec)
            if self._stop_requested:
                if flushed_after_stop:
                    break
                flushed_after_stop = True
            yield event
            if event.kind in ("error", "end"):
                return
        if self._raise_after is not None:
            raise self._raise_after
        if self._emit_end:
            yield RecognitionEvent.end()

    def request_stop(self) -> None:
        self.stop_calls += 1
        self._stop_requested = True

    def name(self) -> str:
        return "scripted"
