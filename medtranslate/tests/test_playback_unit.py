import asyncio

import pytest

from medtranslate.internal_core.errors import EngineUnavailable, NothingToSpeak
from medtranslate.internal_core.tts.mock import RecordingSynthesisEngine
from medtranslate.internal_core.tts.playback import SpeechPlaybackController


def test_speak_goes_speaking_then_idle_with_configured_voice() -> None:
    engine = RecordingSynthesisEngine(duration_sec=0.02)
    statuses = []
    playback = SpeechPlaybackController(engine, rate=0.9, pitch=1.0, on_status=statuses.append)

    async def run() -> None:
        task = playback.speak(" hello there", "en-US")
        await asyncio.sleep(0.005)
        assert playback.status == "speaking"
        await task

    asyncio.run(run())
    assert statuses == ["speaking", "idle"]
    utterance = engine.completed[0]
    assert (utterance.lang, utterance.rate, utterance.pitch) == ("en-US", 0.9, 1.0)


def test_new_speak_cancels_in_flight_playback() -> None:
    engine = RecordingSynthesisEngine(duration_sec=0.05)
    playback = SpeechPlaybackController(engine)

    async def run() -> None:
        first = playback.speak("first", "es-ES")
        await asyncio.sleep(0.005)
        second = playback.speak("second", "es-ES")
        await second
        assert first.cancelled()

    asyncio.run(run())
    assert [u.text for u in engine.utterances] == ["first", "second"]
    assert [u.text for u in engine.completed] == ["second"]
    assert engine.cancel_calls == 1
    assert playback.status == "idle"


def test_blank_text_is_rejected_before_engine_check() -> None:
    with pytest.raises(NothingToSpeak):
        SpeechPlaybackController(None).speak("   ", "en-US")
    with pytest.raises(NothingToSpeak):
        SpeechPlaybackController(RecordingSynthesisEngine()).speak("", "en-US")


def test_missing_engine_raises_unavailable() -> None:
    playback = SpeechPlaybackController(None)
    with pytest.raises(EngineUnavailable):
        playback.speak("hola", "es-ES")
    assert playback.status == "idle"
