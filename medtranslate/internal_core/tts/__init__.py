from __future__ import annotations

from .base import SynthesisEngine, Utterance
from .mock import RecordingSynthesisEngine
from .playback import SpeechPlaybackController

__all__ = ["SynthesisEngine", "Utterance", "RecordingSynthesisEngine", "SpeechPlaybackController"]
