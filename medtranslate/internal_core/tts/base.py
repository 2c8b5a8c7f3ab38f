from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Literal

SynthesisEvent = Literal["start", "end"]


@dataclass(frozen=True)
class Utterance:
    text: str
    lang: str
    rate: float = 0.9
    pitch: float = 1.0


class SynthesisEngine(ABC):
    @abstractmethod
    def play(self, utterance: Utterance) -> AsyncIterator[SynthesisEvent]: ...

    @abstractmethod
    def cancel(self) -> None: ...

    @abstractmethod
    def name(self) -> str: ...
