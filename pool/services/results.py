import logging
from datetime import datetime, UTC

from sqlmodel import Session

from ..errors import InvalidResultError, ResultAlreadyRecordedError
from ..models import Match

logger = logging.getLogger(__name__)


def record_result(db: Session, match: Match, home_score: int, away_score: int, force: bool = False) -> Match:
    """
    Store the official score pair for a match.

    Results are written once; re-posting the same pair is a no-op, a different
    pair needs ``force`` (admin correction).
    """
    for label, value in (("home_score", home_score), ("away_score", away_score)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidResultError(f"{label} must be a non-negative integer, got {value!r}")

    if match.has_result:
        if (match.actual_home_score, match.actual_away_score) == (home_score, away_score):
            return match
        if not force:
            raise ResultAlreadyRecordedError(
                f"Match {match.id} already has result "
                f"{match.actual_home_score}-{match.actual_away_score}"
            )
        logger.warning(
            "Correcting result of match %s from %s-%s to %s-%s",
            match.id, match.actual_home_score, match.actual_away_score, home_score, away_score
        )

    # Both sides in one commit so readers never see half a result
    match.actual_home_score = home_score
    match.actual_away_score = away_score
    match.updated_at = datetime.now(UTC)
    db.add(match)
    db.commit()
    db.refresh(match)

    logger.info("Recorded result for match %s: %s-%s", match.id, home_score, away_score)
    return match
