import pytest

from pool.errors import InvalidResultError, ResultAlreadyRecordedError
from pool.services.results import record_result


def test_record_result(session, fixtures):
    match = record_result(session, fixtures["live"], 0, 3)

    assert (match.actual_home_score, match.actual_away_score) == (0, 3)
    assert match.has_result


def test_same_result_is_idempotent(session, fixtures):
    match = record_result(session, fixtures["finished"], 2, 1)

    assert (match.actual_home_score, match.actual_away_score) == (2, 1)


def test_result_is_not_overwritten_without_force(session, fixtures):
    with pytest.raises(ResultAlreadyRecordedError):
        record_result(session, fixtures["finished"], 0, 0)

    match = record_result(session, fixtures["finished"], 0, 0, force=True)
    assert (match.actual_home_score, match.actual_away_score) == (0, 0)


def test_negative_result_is_rejected(session, fixtures):
    with pytest.raises(InvalidResultError):
        record_result(session, fixtures["live"], -1, 0)
    assert not fixtures["live"].has_result


def test_admin_posts_result(client, admin_token, fixtures):
    client.cookies.set("session_token", admin_token)

    response = client.post(
        f"/api/admin/matches/{fixtures['live'].id}/result",
        json={"home_score": 1, "away_score": 1}
    )

    assert response.status_code == 200
    assert response.json()["actual_home_score"] == 1

    response = client.post(
        f"/api/admin/matches/{fixtures['live'].id}/result",
        json={"home_score": 2, "away_score": 1}
    )
    assert response.status_code == 409


def test_result_requires_admin(client, user_token, fixtures):
    client.cookies.set("session_token", user_token)

    response = client.post(
        f"/api/admin/matches/{fixtures['live'].id}/result",
        json={"home_score": 1, "away_score": 1}
    )

    assert response.status_code == 403


def test_live_result_only_counts_after_live_window(client, session, user, admin_token, fixtures):
    from pool.models import Prediction

    live = fixtures["live"]
    session.add(Prediction(user_id=user.id, match_id=live.id, predicted_home_score=1, predicted_away_score=1))
    session.commit()
    client.cookies.set("session_token", admin_token)
    client.post(f"/api/admin/matches/{live.id}/result", json={"home_score": 1, "away_score": 1})

    # Still inside the live window at the pinned clock
    entries = client.get("/api/leaderboard").json()["entries"]
    assert entries[0]["total_points"] == 0
    assert entries[0]["pending_predictions"] == 1
