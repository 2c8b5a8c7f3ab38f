from __future__ import annotations

"""
Hold the growing original/translated text for the active session.

Design intent:
- Appends only grow the buffers; only clear/reset shrink them.
- Every reset bumps an epoch so late async results can be recognized as stale.
- Observers get immutable snapshots, never the live buffers.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptSnapshot:
    original_text: str
    translated_text: str
    words_translated: int
    session_start: float
    recording_start: Optional[float]
    epoch: int


TranscriptObserver = Callable[[TranscriptSnapshot], None]


class TranscriptAccumulator:
    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._observers: List[TranscriptObserver] = []
        self._original = ""
        self._translated = ""
        self._words_translated = 0
        self._session_start = clock()
        self._recording_start: Optional[float] = None
        self._epoch = 0

    @property
    def original_text(self) -> str:
        return self._original

    @property
    def translated_text(self) -> str:
        return self._translated

    @property
    def words_translated(self) -> int:
        return self._words_translated

    @property
    def session_start(self) -> float:
        return self._session_start

    @property
    def recording_start(self) -> Optional[float]:
        return self._recording_start

    @property
    def epoch(self) -> int:
        return self._epoch

    def append_original(self, chunk: str) -> bool:
        text = (chunk or "").strip()
        if not text:
            return False
        self._original += text + " "
        self._notify()
        return True

    def append_translated(self, text: str) -> None:
        if not text:
            return
        self._translated += text
        self._notify()

    def add_translated_words(self, count: int) -> None:
        if count <= 0:
            return
        self._words_translated += int(count)
        self._notify()

    def clear_original(self) -> None:
        self._original = ""
        self._notify()

    def clear_translated(self) -> None:
        self._translated = ""
        self._notify()

    def reset(self) -> int:
        self._original = ""
        self._translated = ""
        self._words_translated = 0
        self._session_start = self._clock()
        self._epoch += 1
        logger.debug("transcript reset, epoch=%d", self._epoch)
        self._notify()
        return self._epoch

    def mark_recording_started(self) -> None:
        self._recording_start = self._clock()
        self._notify()

    def mark_recording_stopped(self) -> None:
        if self._recording_start is None:
            return
        self._recording_start = None
        self._notify()

    def session_elapsed_sec(self) -> float:
        return max(0.0, self._clock() - self._session_start)

    def recording_elapsed_sec(self) -> float:
        if self._recording_start is None:
            return 0.0
        return max(0.0, self._clock() - self._recording_start)

    def snapshot(self) -> TranscriptSnapshot:
        return TranscriptSnapshot(
            original_text=self._original,
            translated_text=self._translated,
            words_translated=self._words_translated,
            session_start=self._session_start,
            recording_start=self._recording_start,
            epoch=self._epoch,
        )

    def subscribe(self, observer: TranscriptObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _notify(self) -> None:
        if not self._observers:
            return
        snap = self.snapshot()
        for observer in list(self._observers):
            observer(snap)
