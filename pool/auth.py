import secrets
import bcrypt
from datetime import datetime, timedelta, UTC
from typing import Optional
from sqlmodel import Session, select

from .config import SESSION_EXPIRE_DAYS
from .models import User, Session as SessionModel
from .services.lifecycle import as_utc

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """bcrypt hash of ``password`` as text, ready for ``User.password_hash``."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))


def generate_session_token() -> str:
    """URL-safe token used as the cookie or bearer credential."""
    return secrets.token_urlsafe(32)


def create_session(db: Session, user_id: int) -> SessionModel:
    """Open a login session valid for SESSION_EXPIRE_DAYS."""
    session = SessionModel(
        user_id=user_id,
        session_token=generate_session_token(),
        expires_at=datetime.now(UTC) + timedelta(days=SESSION_EXPIRE_DAYS)
    )

    db.add(session)
    db.commit()
    db.refresh(session)

    return session


def get_user_by_session_token(db: Session, session_token: str) -> Optional[User]:
    """Owner of the token, or None when the token is unknown or stale."""
    statement = select(SessionModel).where(SessionModel.session_token == session_token)
    session = db.exec(statement).first()

    if not session:
        return None

    # Stale sessions are purged on first use
    if as_utc(session.expires_at) < datetime.now(UTC):
        db.delete(session)
        db.commit()
        return None

    return db.get(User, session.user_id)


def delete_session(db: Session, session_token: str) -> bool:
    """End a login session. Returns False if the token was not known."""
    statement = select(SessionModel).where(SessionModel.session_token == session_token)
    session = db.exec(statement).first()

    if not session:
        return False

    db.delete(session)
    db.commit()
    return True


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Look up a user by e-mail (case-insensitive) and check the password."""
    statement = select(User).where(User.email == email.strip().lower())
    user = db.exec(statement).first()

    if not user or not verify_password(password, user.password_hash):
        return None

    return user
