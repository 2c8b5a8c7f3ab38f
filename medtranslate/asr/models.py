from __future__ import annotations

"""
Typed recognition events and the utterance chunks derived from them.

Design intent:
- Model the engine as an ordered stream of explicit events, not callbacks.
- Keep result batches index-addressed so only new results are finalized.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field, model_validator

RecognitionEventKind = Literal["started", "results", "error", "end"]


class RecognitionResult(BaseModel):
    transcript: str = ""
    is_final: bool = False
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class RecognitionEvent(BaseModel):
    kind: RecognitionEventKind
    result_index: int = Field(default=0, ge=0)
    results: list[RecognitionResult] = Field(default_factory=list)
    reason: str | None = None

    @model_validator(mode="after")
    def _validate_kind(self) -> "RecognitionEvent":
        if self.kind == "error" and not (self.reason or "").strip():
            raise ValueError("RecognitionEvent.reason is required for error events")
        if self.kind != "results" and self.results:
            raise ValueError("RecognitionEvent.results is only valid for results events")
        return self

    @classmethod
    def started(cls) -> "RecognitionEvent":
        return cls(kind="started")

    @classmethod
    def batch(cls, results: list[RecognitionResult], result_index: int = 0) -> "RecognitionEvent":
        return cls(kind="results", result_index=result_index, results=results)

    @classmethod
    def error(cls, reason: str) -> "RecognitionEvent":
        return cls(kind="error", reason=reason)

    @classmethod
    def end(cls) -> "RecognitionEvent":
        return cls(kind="end")


@dataclass(frozen=True)
class UtteranceChunk:
    text: str
    index: int
    created_at: float
