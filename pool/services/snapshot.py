"""
Point-in-time reads of the store for one ranking pass.
"""

from collections import defaultdict
from typing import List, Optional, Set

from sqlmodel import Session, select

from ..models import Group, GroupMembership, GroupStatus, Match, Prediction, Team, User
from .leaderboard import PlayerSnapshot


def load_matches(db: Session) -> List[Match]:
    return db.exec(select(Match).order_by(Match.start_time, Match.id)).all()


def load_member_ids(db: Session, group_id: int) -> Set[int]:
    """Active member ids of a group; empty for unknown or archived groups."""
    group = db.get(Group, group_id)
    if not group or group.status == GroupStatus.ARCHIVED:
        return set()

    statement = select(GroupMembership.user_id).where(
        GroupMembership.group_id == group_id,
        GroupMembership.is_active == True  # noqa: E712
    )
    return set(db.exec(statement).all())


def load_players(db: Session, user_ids: Optional[Set[int]] = None) -> List[PlayerSnapshot]:
    """
    Build player snapshots ordered by user id (registration order).

    Admin accounts never appear in the ranking.
    """
    statement = select(User).where(User.is_admin == False).order_by(User.id)  # noqa: E712
    if user_ids is not None:
        if not user_ids:
            return []
        statement = statement.where(User.id.in_(sorted(user_ids)))
    users = db.exec(statement).all()

    prediction_statement = select(Prediction)
    if user_ids is not None:
        prediction_statement = prediction_statement.where(Prediction.user_id.in_(sorted(user_ids)))

    predictions_by_user = defaultdict(dict)
    for prediction in db.exec(prediction_statement).all():
        predictions_by_user[prediction.user_id][prediction.match_id] = prediction

    team_codes = {team.id: team.code for team in db.exec(select(Team)).all()}

    return [
        PlayerSnapshot(
            user_id=user.id,
            display_name=user.display_name,
            predictions=predictions_by_user.get(user.id, {}),
            preferred_team=team_codes.get(user.preferred_team_id),
        )
        for user in users
    ]
