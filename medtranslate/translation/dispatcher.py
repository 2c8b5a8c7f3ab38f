from __future__ import annotations

"""
Send finalized utterance chunks for translation and merge the results.

Design intent:
- Exactly one backend call per chunk; no batching, dedupe or retry.
- Results land in completion order; a reset in between makes them stale.
- Failures leave the transcript untouched and are raised to the caller.
"""

import logging
from typing import Optional

from ..internal_core.contracts import TranslationResult
from ..internal_core.errors import EmptyInput, TranslationFailed
from ..session.transcript import TranscriptAccumulator
from .backend import TranslationBackend, count_words

logger = logging.getLogger(__name__)


class TranslationDispatcher:
    def __init__(self, backend: TranslationBackend, transcript: TranscriptAccumulator) -> None:
        self._backend = backend
        self._transcript = transcript
        self.in_flight = 0
        self.discarded = 0

    @property
    def backend(self) -> TranslationBackend:
        return self._backend

    async def translate(
        self,
        chunk: str,
        input_language: str,
        output_language: str,
        domain_hint: bool = True,
        epoch: Optional[int] = None,
    ) -> Optional[TranslationResult]:
        """Translate one chunk and append it unless the transcript was reset.

        `epoch` is the session epoch the chunk was emitted under; it defaults
        to the current one.
        """
        text = (chunk or "").strip()
        if not text:
            raise EmptyInput()

        if epoch is None:
            epoch = self._transcript.epoch
        self.in_flight += 1
        try:
            result = await self._backend.translate(
                text,
                input_language=input_language,
                output_language=output_language,
                medical=domain_hint,
            )
        except TranslationFailed:
            raise
        except Exception as exc:
            raise TranslationFailed(f"{exc.__class__.__name__}: {exc}") from exc
        finally:
            self.in_flight -= 1

        if epoch != self._transcript.epoch:
            self.discarded += 1
            logger.info(
                "discarding stale translation (epoch %d, current %d)",
                epoch,
                self._transcript.epoch,
            )
            return None

        self._transcript.append_translated(" " + result.translatedText)
        self._transcript.add_translated_words(count_words(result.translatedText))
        return result
