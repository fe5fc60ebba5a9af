from datetime import datetime, timedelta, UTC
from typing import Optional

from ..config import LOCK_MINUTES
from ..errors import PredictionLockedError
from .lifecycle import MatchPhase, as_utc, match_phase

LOCK_THRESHOLD = timedelta(minutes=LOCK_MINUTES)


def lock_deadline(match, lock_threshold: timedelta = LOCK_THRESHOLD) -> datetime:
    """Last instant (exclusive) at which predictions for the match are accepted."""
    return as_utc(match.start_time) - lock_threshold


def can_edit(match, now: Optional[datetime] = None, lock_threshold: timedelta = LOCK_THRESHOLD) -> bool:
    """Whether a prediction for ``match`` may still be created or changed at ``now``."""
    if now is None:
        now = datetime.now(UTC)
    if match_phase(match, now) != MatchPhase.SCHEDULED:
        return False
    return as_utc(match.start_time) - as_utc(now) > lock_threshold


def ensure_editable(match, now: Optional[datetime] = None, lock_threshold: timedelta = LOCK_THRESHOLD) -> None:
    if not can_edit(match, now, lock_threshold):
        raise PredictionLockedError(match.id)
