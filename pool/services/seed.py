"""Seed demo teams and the opening fixtures of World Cup 2026."""
import logging
from datetime import datetime, UTC

from sqlmodel import Session, select

from ..auth import hash_password
from ..config import ADMIN_EMAIL, ADMIN_PASSWORD
from ..models import Match, Team, User

logger = logging.getLogger(__name__)

# code, pt, en, es, flag, color
TEAMS = [
    ("BRA", "Brasil", "Brazil", "Brasil", "🇧🇷", "#FFDF00"),
    ("USA", "EUA", "USA", "EE.UU.", "🇺🇸", "#002868"),
    ("MEX", "México", "Mexico", "México", "🇲🇽", "#006847"),
    ("ESP", "Espanha", "Spain", "España", "🇪🇸", "#C60B1E"),
    ("ARG", "Argentina", "Argentina", "Argentina", "🇦🇷", "#75AADB"),
    ("GER", "Alemanha", "Germany", "Alemania", "🇩🇪", "#000000"),
    ("FRA", "França", "France", "Francia", "🇫🇷", "#002395"),
    ("POR", "Portugal", "Portugal", "Portugal", "🇵🇹", "#E42518"),
    ("IRL", "Irlanda", "Ireland", "Irlanda", "🇮🇪", "#169B62"),
    ("CAN", "Canadá", "Canada", "Canadá", "🇨🇦", "#FF0000"),
]

# home, away, kick-off (UTC), venue, stage, result
MATCHES = [
    ("MEX", "USA", datetime(2026, 6, 11, 20, 0, tzinfo=UTC), "Estádio Azteca, Mexico City", "Group A", (2, 1)),
    ("CAN", "IRL", datetime(2026, 6, 12, 18, 0, tzinfo=UTC), "BC Place, Vancouver", "Group B", (1, 1)),
    ("BRA", "ESP", datetime(2026, 6, 13, 21, 0, tzinfo=UTC), "MetLife Stadium, East Rutherford", "Group C", None),
    ("ARG", "GER", datetime(2026, 6, 14, 15, 0, tzinfo=UTC), "SoFi Stadium, Inglewood", "Group D", None),
    ("FRA", "POR", datetime(2026, 6, 15, 19, 0, tzinfo=UTC), "Hard Rock Stadium, Miami", "Group E", None),
]


def ensure_admin(db: Session) -> User:
    admin_user = db.exec(select(User).where(User.email == ADMIN_EMAIL)).first()
    if not admin_user:
        admin_user = User(
            email=ADMIN_EMAIL,
            password_hash=hash_password(ADMIN_PASSWORD),
            name="Admin",
            is_admin=True
        )
        db.add(admin_user)
        db.commit()
        db.refresh(admin_user)
        logger.info("Created admin account %s", ADMIN_EMAIL)
    return admin_user


def seed_demo_data(db: Session) -> None:
    """Insert the demo teams and matches unless they already exist."""
    if db.exec(select(Team)).first():
        return

    teams = {}
    for code, name_pt, name_en, name_es, flag, color in TEAMS:
        team = Team(code=code, name_pt=name_pt, name_en=name_en, name_es=name_es, flag=flag, color=color)
        db.add(team)
        teams[code] = team
    db.commit()

    for home, away, start_time, venue, stage, result in MATCHES:
        match = Match(
            home_team_id=teams[home].id,
            away_team_id=teams[away].id,
            start_time=start_time,
            venue=venue,
            stage=stage
        )
        if result:
            match.actual_home_score, match.actual_away_score = result
        db.add(match)
    db.commit()

    logger.info("Seeded %d teams and %d matches", len(TEAMS), len(MATCHES))
