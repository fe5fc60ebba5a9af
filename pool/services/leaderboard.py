"""
Leaderboard aggregation over read-only player and match snapshots.

Ordering: total points (desc), then exact hits (desc), then the order the
players were enumerated in. ``sorted`` is stable so the last key needs no
explicit handling. Rank labels are positional (1..N); tied players still get
distinct positions.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .scoring import DEFAULT_RULES, ScoreTier, ScoringRules, evaluate_prediction


class PlayerSnapshot:
    """A user and their predictions keyed by match id."""

    def __init__(
        self,
        user_id: int,
        display_name: str,
        predictions: Optional[Dict[int, object]] = None,
        preferred_team: Optional[str] = None,
    ):
        self.user_id = user_id
        self.display_name = display_name
        self.predictions = predictions or {}
        self.preferred_team = preferred_team

    def __repr__(self):
        return f"PlayerSnapshot({self.user_id}, {self.display_name!r}, {len(self.predictions)} predictions)"


class LeaderboardEntry:
    """One row of a ranking."""

    def __init__(self, player: PlayerSnapshot):
        self.player = player
        self.rank = 0
        self.total_points = 0
        self.exact_hits = 0
        self.scored_predictions = 0
        self.pending_predictions = 0

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "user_id": self.player.user_id,
            "display_name": self.player.display_name,
            "preferred_team": self.player.preferred_team,
            "total_points": self.total_points,
            "exact_hits": self.exact_hits,
            "scored_predictions": self.scored_predictions,
            "pending_predictions": self.pending_predictions,
        }

    def __repr__(self):
        return f"#{self.rank} {self.player.display_name}: {self.total_points}pts"


def score_player(
    player: PlayerSnapshot,
    matches: Iterable,
    rules: ScoringRules = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> LeaderboardEntry:
    """
    Sum a player's points over the match feed.

    Predictions for matches missing from the feed are never looked at; missing
    predictions and pending matches contribute nothing.
    """
    entry = LeaderboardEntry(player)
    for match in matches:
        prediction = player.predictions.get(match.id)
        if prediction is None:
            continue

        result = evaluate_prediction(prediction, match, rules, now)
        if result["points"] is None:
            entry.pending_predictions += 1
            continue

        entry.total_points += result["points"]
        entry.scored_predictions += 1
        if result["tier"] == ScoreTier.EXACT:
            entry.exact_hits += 1

    return entry


def rank_players(
    players: Iterable[PlayerSnapshot],
    matches: Iterable,
    member_ids: Optional[Iterable[int]] = None,
    rules: ScoringRules = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> List[LeaderboardEntry]:
    """
    Rank players by accumulated points.

    Args:
        players: Player snapshots in a stable enumeration order
        matches: Match feed snapshot
        member_ids: Restrict the ranking to these user ids (a group). ``None``
            ranks the whole population, which is only meant for ungrouped
            contexts. An empty set yields an empty ranking.
        rules: Scoring weights
        now: Only matches FINISHED at this instant are scored when given

    Returns:
        Entries ordered best first with positional ranks
    """
    matches = list(matches)
    if member_ids is not None:
        member_ids = set(member_ids)
        players = [player for player in players if player.user_id in member_ids]

    entries = [score_player(player, matches, rules, now) for player in players]
    entries = sorted(entries, key=lambda e: (-e.total_points, -e.exact_hits))

    for position, entry in enumerate(entries, start=1):
        entry.rank = position

    return entries
