import secrets
from datetime import datetime, timedelta, UTC

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from main import app
from pool.auth import hash_password
from pool.database import get_session
from pool.dependencies import get_now
from pool.models import Match, Team, User, Session as UserSession

# Create in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

# Pinned clock for API tests
NOW = datetime(2026, 6, 13, 12, 0, tzinfo=UTC)

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(name="session")
def session_fixture():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_now] = lambda: NOW
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def create_user(session: Session, email: str, name: str = "Test", is_admin: bool = False) -> User:
    user = User(
        email=email,
        password_hash=hash_password("password123"),
        name=name,
        surname="User",
        is_admin=is_admin
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def create_token(session: Session, user: User) -> str:
    token = secrets.token_urlsafe(32)
    session.add(UserSession(
        user_id=user.id,
        session_token=token,
        expires_at=datetime.now(UTC) + timedelta(days=7)
    ))
    session.commit()
    return token


@pytest.fixture(name="user")
def user_fixture(session: Session):
    return create_user(session, "testuser@example.com")


@pytest.fixture(name="user_token")
def user_token_fixture(session: Session, user: User):
    """Valid session token for the test user."""
    return create_token(session, user)


@pytest.fixture(name="admin_token")
def admin_token_fixture(session: Session):
    admin = create_user(session, "admin@example.com", name="Admin", is_admin=True)
    return create_token(session, admin)


@pytest.fixture(name="fixtures")
def fixtures_fixture(session: Session):
    """Teams plus a finished, a live and an upcoming match relative to NOW."""
    mexico = Team(code="MEX", name_pt="México", name_en="Mexico", name_es="México", flag="🇲🇽")
    usa = Team(code="USA", name_pt="EUA", name_en="USA", name_es="EE.UU.", flag="🇺🇸")
    brazil = Team(code="BRA", name_pt="Brasil", name_en="Brazil", name_es="Brasil", flag="🇧🇷")
    spain = Team(code="ESP", name_pt="Espanha", name_en="Spain", name_es="España", flag="🇪🇸")
    session.add_all([mexico, usa, brazil, spain])
    session.commit()

    finished = Match(
        home_team_id=mexico.id,
        away_team_id=usa.id,
        start_time=NOW - timedelta(days=1),
        venue="Estádio Azteca",
        stage="Group A",
        actual_home_score=2,
        actual_away_score=1
    )
    live = Match(
        home_team_id=usa.id,
        away_team_id=brazil.id,
        start_time=NOW - timedelta(minutes=30),
        venue="SoFi Stadium",
        stage="Group A"
    )
    upcoming = Match(
        home_team_id=brazil.id,
        away_team_id=spain.id,
        start_time=NOW + timedelta(hours=9),
        venue="MetLife Stadium",
        stage="Group C"
    )
    session.add_all([finished, live, upcoming])
    session.commit()
    for match in (finished, live, upcoming):
        session.refresh(match)

    return {"finished": finished, "live": live, "upcoming": upcoming}
