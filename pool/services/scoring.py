"""
Scoring engine.

Rules (first matching tier wins, tiers never add up):
- Exact score: ``exact`` points (25 by default)
- Correct outcome and goal difference: ``diff`` points (18)
- Correct outcome only: ``outcome`` points (10)
- One side's score right: ``oneScore`` points (4)
- Otherwise: 0

A joker doubles whatever the tier awarded. A prediction on a match without an
official result is pending (``None``), which is not the same as zero points.
"""

import json
import logging
from datetime import datetime, UTC
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .. import config
from ..errors import InvalidPredictionError, InvalidResultError
from .lifecycle import MatchPhase, match_phase

logger = logging.getLogger(__name__)

JOKER_MULTIPLIER = 2


class ScoringRules(BaseModel):
    """Point weights for each tier."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    exact: int = Field(default=25, ge=0)
    diff: int = Field(default=18, ge=0)
    outcome: int = Field(default=10, ge=0)
    one_score: int = Field(default=4, ge=0, alias="oneScore")

    @classmethod
    def from_file(cls, path: str | Path) -> "ScoringRules":
        """Load weights from a JSON file with exact/diff/outcome/oneScore keys."""
        try:
            return cls.model_validate(json.loads(Path(path).read_text()))
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise ValueError(f"Invalid scoring rules file {path}: {exc}") from exc

    @classmethod
    def from_config(cls) -> "ScoringRules":
        if config.SCORING_RULES_FILE:
            rules = cls.from_file(config.SCORING_RULES_FILE)
            logger.info("Loaded scoring rules from %s: %s", config.SCORING_RULES_FILE, rules)
            return rules
        return cls(
            exact=config.SCORE_EXACT,
            diff=config.SCORE_DIFF,
            outcome=config.SCORE_OUTCOME,
            one_score=config.SCORE_ONE_SIDE,
        )

    def possible_points(self) -> set[int]:
        base = {0, self.one_score, self.outcome, self.diff, self.exact}
        return base | {points * JOKER_MULTIPLIER for points in base}


DEFAULT_RULES = ScoringRules()


class ScoreTier(str, Enum):
    EXACT = "exact"
    DIFF = "diff"
    OUTCOME = "outcome"
    ONE_SCORE = "one_score"
    MISS = "miss"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _check_score(value, label: str, error=InvalidPredictionError) -> int:
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise error(f"{label} must be a non-negative integer, got {value!r}")
    return value


def official_result(match) -> Optional[tuple[int, int]]:
    """Return the (home, away) official score, or None when not recorded yet."""
    home, away = match.actual_home_score, match.actual_away_score
    if home is None and away is None:
        return None
    if home is None or away is None:
        raise InvalidResultError(f"Match {match.id} has a partial result ({home}, {away})")
    return (
        _check_score(home, "actual_home_score", InvalidResultError),
        _check_score(away, "actual_away_score", InvalidResultError),
    )


def resolve_tier(predicted_home: int, predicted_away: int, actual_home: int, actual_away: int) -> ScoreTier:
    if predicted_home == actual_home and predicted_away == actual_away:
        return ScoreTier.EXACT

    actual_diff = actual_home - actual_away
    predicted_diff = predicted_home - predicted_away
    correct_outcome = _sign(actual_diff) == _sign(predicted_diff)

    if correct_outcome and actual_diff == predicted_diff:
        return ScoreTier.DIFF
    if correct_outcome:
        return ScoreTier.OUTCOME
    if predicted_home == actual_home or predicted_away == actual_away:
        return ScoreTier.ONE_SCORE
    return ScoreTier.MISS


def tier_points(tier: ScoreTier, rules: ScoringRules) -> int:
    return {
        ScoreTier.EXACT: rules.exact,
        ScoreTier.DIFF: rules.diff,
        ScoreTier.OUTCOME: rules.outcome,
        ScoreTier.ONE_SCORE: rules.one_score,
        ScoreTier.MISS: 0,
    }[tier]


def evaluate_prediction(
    prediction,
    match,
    rules: ScoringRules = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> dict:
    """
    Score a single prediction against a match.

    Only FINISHED matches are scored, as judged by the lifecycle resolver at
    ``now`` (the wall clock when omitted). A result recorded during the live
    window stays pending until the window closes.

    Returns:
        dict with ``points`` (None while pending), ``tier``, ``joker`` and
        ``status`` ("pending" or "complete")
    """
    predicted_home = _check_score(prediction.predicted_home_score, "predicted_home_score")
    predicted_away = _check_score(prediction.predicted_away_score, "predicted_away_score")
    joker = bool(prediction.is_joker)

    if now is None:
        now = datetime.now(UTC)

    result = official_result(match)
    if result is None or match_phase(match, now) != MatchPhase.FINISHED:
        return {"points": None, "tier": None, "joker": joker, "status": "pending"}

    tier = resolve_tier(predicted_home, predicted_away, *result)
    points = tier_points(tier, rules)
    if joker:
        points *= JOKER_MULTIPLIER

    return {"points": points, "tier": tier, "joker": joker, "status": "complete"}


def calculate_points(
    prediction,
    match,
    rules: ScoringRules = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> Optional[int]:
    """Points for one prediction, or None when the match cannot be scored yet."""
    return evaluate_prediction(prediction, match, rules, now)["points"]
