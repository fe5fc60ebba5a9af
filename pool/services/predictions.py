import logging
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from .. import config
from ..errors import InvalidPredictionError, JokerLimitError, PredictionLockedError
from ..models import Match, Prediction
from .lock import ensure_editable

logger = logging.getLogger(__name__)


def validate_scores(home_score, away_score) -> None:
    for label, value in (("home_score", home_score), ("away_score", away_score)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidPredictionError(f"{label} must be a non-negative integer, got {value!r}")


def get_prediction(db: Session, user_id: int, match_id: int) -> Optional[Prediction]:
    statement = select(Prediction).where(
        Prediction.user_id == user_id,
        Prediction.match_id == match_id
    )
    return db.exec(statement).first()


def count_jokers(db: Session, user_id: int, exclude_match_id: Optional[int] = None) -> int:
    """Jokers the user has on fixtures still in the feed."""
    statement = (
        select(func.count(Prediction.id))
        .join(Match, Match.id == Prediction.match_id)
        .where(
            Prediction.user_id == user_id,
            Prediction.is_joker == True  # noqa: E712
        )
    )
    if exclude_match_id is not None:
        statement = statement.where(Prediction.match_id != exclude_match_id)
    return db.exec(statement).one()


def _apply(prediction: Prediction, home_score: int, away_score: int, is_joker: bool, now: datetime) -> None:
    prediction.predicted_home_score = home_score
    prediction.predicted_away_score = away_score
    prediction.is_joker = is_joker
    prediction.updated_at = now


def upsert_prediction(
    db: Session,
    user_id: int,
    match: Match,
    home_score: int,
    away_score: int,
    is_joker: bool = False,
    now: Optional[datetime] = None,
    max_jokers: Optional[int] = None,
) -> Prediction:
    """
    Create or overwrite the user's prediction for a match.

    Last write wins: there is a single row per (user, match) and an edit
    replaces it in place. If another writer inserts the row between our lookup
    and our insert, the unique constraint fires and the row it created is
    overwritten instead.

    The joker cap is checked before the write and again after it. When two
    concurrent jokers both pass the first check, the recount drops the joker
    flag from this prediction (its scores stay saved) and raises.
    """
    if now is None:
        now = datetime.now(UTC)
    if max_jokers is None:
        max_jokers = config.MAX_JOKERS

    validate_scores(home_score, away_score)

    try:
        ensure_editable(match, now)
    except PredictionLockedError:
        logger.info("Rejected prediction for locked match %s by user %s", match.id, user_id)
        raise

    match_id = match.id
    capped = is_joker and max_jokers > 0
    if capped and count_jokers(db, user_id, exclude_match_id=match_id) >= max_jokers:
        logger.info("User %s hit the joker limit (%s)", user_id, max_jokers)
        raise JokerLimitError(max_jokers)

    prediction = get_prediction(db, user_id, match_id)
    if prediction:
        _apply(prediction, home_score, away_score, is_joker, now)
    else:
        prediction = Prediction(user_id=user_id, match_id=match_id, created_at=now)
        _apply(prediction, home_score, away_score, is_joker, now)
    db.add(prediction)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Prediction for match %s by user %s was written concurrently, overwriting", match_id, user_id)
        prediction = get_prediction(db, user_id, match_id)
        if prediction is None:
            raise
        _apply(prediction, home_score, away_score, is_joker, now)
        db.add(prediction)
        db.commit()

    if capped and count_jokers(db, user_id) > max_jokers:
        logger.info("User %s went over the joker limit concurrently, dropping joker on match %s", user_id, match_id)
        prediction.is_joker = False
        db.add(prediction)
        db.commit()
        raise JokerLimitError(max_jokers)

    db.refresh(prediction)
    return prediction


def delete_prediction(db: Session, user_id: int, match: Match, now: Optional[datetime] = None) -> bool:
    """Remove a prediction while the match is still open. Returns False if there was none."""
    ensure_editable(match, now)

    prediction = get_prediction(db, user_id, match.id)
    if not prediction:
        return False

    db.delete(prediction)
    db.commit()
    return True
