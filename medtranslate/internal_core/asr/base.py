from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator

from ...asr.models import RecognitionEvent


class RecognitionEngine(ABC):
    """Source of recognition events for one start/stop cycle per `stream` call."""

    @abstractmethod
    def stream(
        self, locale: str, *, continuous: bool = True, interim_results: bool = True
    ) -> AsyncIterator[RecognitionEvent]: ...

    @abstractmethod
    def request_stop(self) -> None: ...

    @abstractmethod
    def name(self) -> str: ...
