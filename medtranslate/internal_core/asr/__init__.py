from __future__ import annotations

"""
Speech recognition engines and the controller that turns their events into chunks.

Design intent:
- Engines implement one async event stream behind the RecognitionEngine ABC.
- The controller owns recording status and emits only finalized text.
- The scripted engine replays canned events for tests and offline runs.
"""

from .base import RecognitionEngine
from .controller import RecognitionSessionController, finalize_results
from .mock import ScriptedRecognitionEngine

__all__ = [
    "RecognitionEngine",
    "RecognitionSessionController",
    "ScriptedRecognitionEngine",
    "finalize_results",
]
