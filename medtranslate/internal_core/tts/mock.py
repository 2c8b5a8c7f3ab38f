from __future__ import annotations

import asyncio
from typing import AsyncIterator, List

from .base import SynthesisEngine, SynthesisEvent, Utterance


class RecordingSynthesisEngine(SynthesisEngine):
    """Pretends to speak for `duration_sec` and records what it was asked to say."""

    def __init__(self, *, duration_sec: float = 0.0) -> None:
        self._duration_sec = duration_sec
        self.utterances: List[Utterance] = []
        self.completed: List[Utterance] = []
        self.cancel_calls = 0

    async def play(self, utterance: Utterance) -> AsyncIterator[SynthesisEvent]:
        self.utterances.append(utterance)
        yield "start"
        await asyncio.sleep(self._duration_sec)
        self.completed.append(utterance)
        yield "end"

    def cancel(self) -> None:
        self.cancel_calls += 1

    def name(self) -> str:
        return "recording"
