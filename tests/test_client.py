import asyncio
import json

import httpx
import pytest

from neontype.client.session import CompletedAttempt
from neontype.client.storage import HistoryEntry, JsonFileStore, MemoryStore
from neontype.client.submit import RankingClient, RankingUnavailable, SubmissionFailed
from neontype.client.texts import DEFAULT_TEXT, TextLibrary

ATTEMPT = CompletedAttempt(
    target_text="hello",
    input="hello",
    start_time=1_700_000_000_000,
    end_time=1_700_000_002_000,
)


def _transport(status, body, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def test_submission_unavailable_without_backend():
    store = MemoryStore()
    client = RankingClient(store, base_url="")
    assert not client.available
    with pytest.raises(RankingUnavailable):
        asyncio.run(client.submit(ATTEMPT, "alice"))
    assert store.read_history() == []


def test_successful_submission_records_history():
    seen = []
    body = {"success": True, "score": 11672, "cpm": 150, "accuracy": 100.0, "rank": 3, "isHighScore": True}
    store = MemoryStore()
    client = RankingClient(
        store,
        base_url="https://rank.example/",
        transport=_transport(200, body, seen),
        clock=lambda: 1_700_000_003_000,
    )

    result = asyncio.run(client.submit(ATTEMPT, "  alice "))

    assert result.rank == 3
    assert result.is_high_score
    assert str(seen[0].url) == "https://rank.example/submit-score"
    sent = json.loads(seen[0].content)
    assert sent["username"] == "alice"
    assert sent["submittedAt"] == 1_700_000_003_000
    assert store.get_username() == "alice"
    history = store.read_history()
    assert len(history) == 1
    assert (history[0].score, history[0].cpm, history[0].accuracy) == (11672, 150, 100.0)


def test_rejected_submission_raises_with_reason():
    store = MemoryStore()
    client = RankingClient(
        store,
        base_url="https://rank.example",
        transport=_transport(400, {"error": "Invalid play duration"}),
    )
    with pytest.raises(SubmissionFailed) as exc_info:
        asyncio.run(client.submit(ATTEMPT, "alice"))
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid play duration"
    assert store.read_history() == []
    assert store.get_username() is None


def test_non_object_error_body_falls_back_to_text():
    store = MemoryStore()
    client = RankingClient(
        store,
        base_url="https://rank.example",
        transport=_transport(502, ["upstream", "unavailable"]),
    )
    with pytest.raises(SubmissionFailed) as exc_info:
        asyncio.run(client.submit(ATTEMPT, "alice"))
    assert exc_info.value.status_code == 502
    assert json.loads(exc_info.value.message) == ["upstream", "unavailable"]
    assert store.read_history() == []


def test_bad_username_rejected_locally():
    client = RankingClient(MemoryStore(), base_url="https://rank.example", transport=_transport(200, {}))
    with pytest.raises(ValueError):
        asyncio.run(client.submit(ATTEMPT, "   "))


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "local.json"
    store = JsonFileStore(path)
    assert store.get_username() is None
    assert store.read_history() == []

    store.set_username("alice")
    store.append_history(HistoryEntry(date="2026-01-01T00:00:00", score=10, cpm=100, accuracy=90.5))
    store.append_history(HistoryEntry(date="2026-01-02T00:00:00", score=20, cpm=110, accuracy=91.0))

    reopened = JsonFileStore(path)
    assert reopened.get_username() == "alice"
    assert [e.score for e in reopened.read_history()] == [10, 20]


def test_json_file_store_tolerates_garbage(tmp_path):
    path = tmp_path / "local.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.read_history() == []
    store.append_history(HistoryEntry(date="d", score=1, cpm=2, accuracy=3.0))
    assert len(store.read_history()) == 1


def test_text_library_loads_and_picks(tmp_path):
    (tmp_path / "a.txt").write_text("first passage\r\nline two\n", encoding="utf-8")
    (tmp_path / "b.txt").write_text("   ", encoding="utf-8")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")
    library = TextLibrary(tmp_path)
    assert library.texts == ["first passage\nline two"]
    assert library.random_text() == "first passage\nline two"


def test_text_library_falls_back_to_default(tmp_path):
    assert TextLibrary(tmp_path / "missing").random_text() == DEFAULT_TEXT
