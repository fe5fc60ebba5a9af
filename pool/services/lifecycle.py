"""
Match lifecycle resolution.

A match is SCHEDULED before kick-off, LIVE from kick-off until a result has
been recorded and the live window has elapsed, then FINISHED. Every other
part of the pool (lock gate, scoring eligibility, API display state) derives
the phase from here.
"""

from datetime import datetime, timedelta, UTC
from enum import Enum
from typing import Optional

from ..config import LIVE_WINDOW_MINUTES

LIVE_WINDOW = timedelta(minutes=LIVE_WINDOW_MINUTES)


class MatchPhase(str, Enum):
    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    FINISHED = "FINISHED"


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back naive; they are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def resolve_phase(
    start_time: datetime,
    now: datetime,
    has_result: bool,
    live_window: timedelta = LIVE_WINDOW,
) -> MatchPhase:
    start_time = as_utc(start_time)
    now = as_utc(now)

    if now < start_time:
        return MatchPhase.SCHEDULED

    if has_result and now - start_time > live_window:
        return MatchPhase.FINISHED

    return MatchPhase.LIVE


def match_phase(match, now: Optional[datetime] = None, live_window: timedelta = LIVE_WINDOW) -> MatchPhase:
    """Resolve the phase of a Match record."""
    if now is None:
        now = datetime.now(UTC)
    has_result = match.actual_home_score is not None and match.actual_away_score is not None
    return resolve_phase(match.start_time, now, has_result, live_window)
