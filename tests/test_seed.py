from sqlmodel import select

from pool.models import Match, Team, User
from pool.services.seed import ensure_admin, seed_demo_data


def test_seed_demo_data_is_idempotent(session):
    seed_demo_data(session)
    seed_demo_data(session)

    assert len(session.exec(select(Team)).all()) == 10
    matches = session.exec(select(Match)).all()
    assert len(matches) == 5
    assert sum(1 for match in matches if match.has_result) == 2


def test_ensure_admin(session):
    admin = ensure_admin(session)
    again = ensure_admin(session)

    assert admin.id == again.id
    assert admin.is_admin
    assert len(session.exec(select(User)).all()) == 1
