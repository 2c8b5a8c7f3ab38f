from __future__ import annotations

import datetime as _dt
import logging
import time
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Union

from .contracts import SessionMetadata, SessionRecord
from .errors import IncompleteSession

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10
DEFAULT_LIST_LIMIT = 5


class InMemorySessionLedger:
    """Bounded, newest-first history of saved sessions. Lost on restart."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        list_limit: int = DEFAULT_LIST_LIMIT,
        clock: Callable[[], float] = time.time,
    ):
        self._capacity = max(1, int(capacity))
        self._list_limit = max(1, int(list_limit))
        self._clock = clock
        self._lock = RLock()
        self._records: List[SessionRecord] = []
        self._last_id_ms = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def _next_id(self, now: float) -> str:
        id_ms = int(now * 1000)
        if id_ms <= self._last_id_ms:
            id_ms = self._last_id_ms + 1
        self._last_id_ms = id_ms
        return str(id_ms)

    def save(
        self,
        original_text: str,
        translated_text: str,
        input_language: str,
        output_language: str,
        metadata: Optional[Union[SessionMetadata, Dict[str, Any]]] = None,
    ) -> SessionRecord:
        if not (original_text or "").strip() or not (translated_text or "").strip():
            raise IncompleteSession()

        if metadata is None:
            meta = SessionMetadata()
        elif isinstance(metadata, SessionMetadata):
            meta = metadata
        else:
            meta = SessionMetadata.model_validate(metadata)

        with self._lock:
            now = self._clock()
            record = SessionRecord(
                id=self._next_id(now),
                timestamp=_dt.datetime.fromtimestamp(now, _dt.timezone.utc).isoformat(),
                originalText=original_text,
                translatedText=translated_text,
                inputLanguage=input_language,
                outputLanguage=output_language,
                metadata=meta,
            )
            self._records.insert(0, record)
            evicted = len(self._records) - self._capacity
            del self._records[self._capacity :]

        if evicted > 0:
            logger.debug("ledger evicted %d record(s)", evicted)
        logger.info("session saved id=%s words=%d", record.id, meta.wordsTranslated)
        return record

    def list(self, limit: Optional[int] = None) -> List[SessionRecord]:
        cap = self._list_limit if limit is None else max(0, min(int(limit), self._capacity))
        with self._lock:
            return list(self._records[:cap])

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records = []
