from datetime import timedelta

import pytest
from sqlmodel import select

from conftest import NOW
from pool.errors import JokerLimitError
from pool.models import Match, Prediction
from pool.services import predictions
from pool.services.predictions import count_jokers, upsert_prediction


def fail_first_call(monkeypatch, name, first_result):
    """Make ``predictions.<name>`` return ``first_result`` once, then behave normally."""
    real = getattr(predictions, name)
    calls = []

    def wrapper(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return first_result
        return real(*args, **kwargs)

    monkeypatch.setattr(predictions, name, wrapper)
    return calls


def test_row_written_by_another_session_is_overwritten(monkeypatch, session, user, fixtures):
    upcoming = fixtures["upcoming"]
    session.add(Prediction(user_id=user.id, match_id=upcoming.id,
                           predicted_home_score=0, predicted_away_score=0))
    session.commit()
    # The lookup misses the row, as if it were inserted right after we looked
    fail_first_call(monkeypatch, "get_prediction", None)

    prediction = upsert_prediction(session, user.id, upcoming, 3, 1, now=NOW)

    rows = session.exec(select(Prediction).where(Prediction.user_id == user.id)).all()
    assert len(rows) == 1
    assert rows[0].id == prediction.id
    assert (rows[0].predicted_home_score, rows[0].predicted_away_score) == (3, 1)


def test_concurrent_second_joker_is_dropped(monkeypatch, session, user, fixtures):
    upcoming = fixtures["upcoming"]
    other = Match(home_team_id=upcoming.home_team_id, away_team_id=upcoming.away_team_id,
                  start_time=NOW + timedelta(days=2), stage="Group C")
    session.add(other)
    session.add(Prediction(user_id=user.id, match_id=upcoming.id,
                           predicted_home_score=1, predicted_away_score=0, is_joker=True))
    session.commit()
    # The first count does not see the joker played on the other match yet
    fail_first_call(monkeypatch, "count_jokers", 0)

    with pytest.raises(JokerLimitError):
        upsert_prediction(session, user.id, other, 2, 2, is_joker=True, now=NOW, max_jokers=1)

    saved = session.exec(select(Prediction).where(Prediction.match_id == other.id)).one()
    assert (saved.predicted_home_score, saved.predicted_away_score) == (2, 2)
    assert saved.is_joker is False
    assert count_jokers(session, user.id) == 1


def test_stale_joker_does_not_count(session, user, fixtures):
    # Joker left on a fixture that is no longer in the feed
    session.add(Prediction(user_id=user.id, match_id=999,
                           predicted_home_score=1, predicted_away_score=0, is_joker=True))
    session.commit()

    assert count_jokers(session, user.id) == 0

    prediction = upsert_prediction(session, user.id, fixtures["upcoming"], 2, 0, is_joker=True,
                                   now=NOW, max_jokers=1)

    assert prediction.is_joker is True
    assert count_jokers(session, user.id) == 1


def test_joker_on_a_feed_match_still_counts(session, user, fixtures):
    session.add(Prediction(user_id=user.id, match_id=fixtures["finished"].id,
                           predicted_home_score=1, predicted_away_score=0, is_joker=True))
    session.commit()

    with pytest.raises(JokerLimitError):
        upsert_prediction(session, user.id, fixtures["upcoming"], 2, 0, is_joker=True,
                          now=NOW, max_jokers=1)
