from datetime import datetime

from sqlmodel import select

from neontype.models import ScoreRecord
from neontype.services import ranking
from neontype.services.ranking import rank_for_score, record_attempt, top_scores
from neontype.services.scoring import ScoreMetrics


def _metrics(score, cpm=100, accuracy=95.0):
    return ScoreMetrics(cpm=cpm, accuracy=accuracy, score=score)


def _records(session, username):
    return session.exec(select(ScoreRecord).where(ScoreRecord.username == username)).all()


def test_first_submission_inserts(session):
    result = record_attempt(session, "alice", _metrics(500))
    assert result.is_high_score
    assert result.rank == 1
    rows = _records(session, "alice")
    assert len(rows) == 1
    assert rows[0].score == 500


def test_higher_score_replaces_then_lower_only_touches_last_played(session):
    record_attempt(session, "alice", _metrics(500))
    raised = record_attempt(session, "alice", _metrics(600, cpm=120, accuracy=99.0))
    assert raised.is_high_score
    session.expire_all()
    best = _records(session, "alice")[0]
    assert (best.score, best.cpm, best.accuracy) == (600, 120, 99.0)
    played_before = best.last_played_at
    created_before = best.created_at

    lower = record_attempt(session, "alice", _metrics(400, cpm=80, accuracy=70.0))
    assert not lower.is_high_score
    session.expire_all()
    rows = _records(session, "alice")
    assert len(rows) == 1
    assert (rows[0].score, rows[0].cpm, rows[0].accuracy) == (600, 120, 99.0)
    assert rows[0].created_at == created_before
    assert rows[0].last_played_at >= played_before


def test_lower_score_moves_last_played_to_submission_time(session, monkeypatch):
    instants = iter(
        [
            datetime(2026, 1, 1, 12, 0, 0),
            datetime(2026, 1, 1, 12, 5, 0),
            datetime(2026, 1, 1, 12, 10, 0),
        ]
    )
    monkeypatch.setattr(ranking, "utcnow", lambda: next(instants))

    record_attempt(session, "alice", _metrics(600))
    record_attempt(session, "alice", _metrics(400))
    session.expire_all()
    row = _records(session, "alice")[0]
    assert row.score == 600
    assert row.created_at.replace(tzinfo=None) == datetime(2026, 1, 1, 12, 0, 0)
    assert row.last_played_at.replace(tzinfo=None) == datetime(2026, 1, 1, 12, 5, 0)

    record_attempt(session, "alice", _metrics(300))
    session.expire_all()
    row = _records(session, "alice")[0]
    assert row.created_at.replace(tzinfo=None) == datetime(2026, 1, 1, 12, 0, 0)
    assert row.last_played_at.replace(tzinfo=None) == datetime(2026, 1, 1, 12, 10, 0)


def test_equal_score_is_not_a_high_score(session):
    record_attempt(session, "alice", _metrics(500))
    assert not record_attempt(session, "alice", _metrics(500)).is_high_score


def test_rank_reflects_submitted_attempt(session):
    record_attempt(session, "alice", _metrics(900))
    record_attempt(session, "bob", _metrics(700))
    record_attempt(session, "carol", _metrics(800))
    # bob's weaker run is ranked on its own score, not his stored best
    weaker = record_attempt(session, "bob", _metrics(100))
    assert not weaker.is_high_score
    assert weaker.rank == 4
    assert rank_for_score(session, 850) == 2
    assert rank_for_score(session, 10_000) == 1


def test_top_scores_orders_descending(session):
    for name, score in [("a", 10), ("b", 30), ("c", 20)]:
        record_attempt(session, name, _metrics(score))
    assert [r.username for r in top_scores(session, 2)] == ["b", "c"]
