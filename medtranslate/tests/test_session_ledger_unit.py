import pytest

from medtranslate.internal_core.contracts import SessionMetadata
from medtranslate.internal_core.errors import IncompleteSession
from medtranslate.internal_core.session_ledger import InMemorySessionLedger


def _save(ledger: InMemorySessionLedger, n: int):
    return ledger.save(
        f"original {n}",
        f"translated {n}",
        "en-US",
        "es-ES",
        SessionMetadata(sessionDuration=n, wordsTranslated=2),
    )


def test_save_rejects_blank_translation_and_leaves_ledger_unchanged() -> None:
    ledger = InMemorySessionLedger()
    _save(ledger, 1)
    before = ledger.list()

    with pytest.raises(IncompleteSession):
        ledger.save("hi", "", "en-US", "es-ES")
    with pytest.raises(IncompleteSession):
        ledger.save("   ", "hola", "en-US", "es-ES")

    assert len(ledger) == 1
    assert ledger.list() == before


def test_eleventh_save_evicts_oldest_and_list_returns_five_newest() -> None:
    ledger = InMemorySessionLedger(clock=lambda: 1_700_000_000.0)
    records = [_save(ledger, n) for n in range(10)]
    assert len(ledger) == 10

    eleventh = _save(ledger, 10)

    assert len(ledger) == 10
    listed = ledger.list()
    assert [r.id for r in listed] == [eleventh.id] + [r.id for r in reversed(records[6:])]
    everything = ledger.list(limit=100)
    assert len(everything) == 10
    assert records[0].id not in [r.id for r in everything]


def test_ids_are_strictly_increasing_even_with_a_frozen_clock() -> None:
    ledger = InMemorySessionLedger(clock=lambda: 1_700_000_000.0)
    ids = [int(_save(ledger, n).id) for n in range(4)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 4
    assert ids[0] == 1_700_000_000_000


def test_list_returns_a_copy_and_accepts_dict_metadata() -> None:
    ledger = InMemorySessionLedger()
    record = ledger.save(
        "dolor",
        "pain",
        "es-ES",
        "en-US",
        {"sessionDuration": 12, "wordsTranslated": 1, "timestamp": "2024-01-01T00:00:00Z"},
    )
    listed = ledger.list()
    listed.clear()

    assert len(ledger) == 1
    assert record.metadata.sessionDuration == 12
    assert record.timestamp
