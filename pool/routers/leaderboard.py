from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..database import get_session
from ..dependencies import get_now, get_scoring_rules, require_user
from ..errors import GroupPermissionError
from ..models import Group, User
from ..services.groups import get_membership
from ..services.leaderboard import rank_players
from ..services.scoring import ScoringRules
from ..services.snapshot import load_matches, load_member_ids, load_players

router = APIRouter(prefix="/api", tags=["leaderboard"])


def check_group_access(db: Session, group_id: int, user: User) -> None:
    """Only active members (and admins) may see a group's ranking."""
    group = db.get(Group, group_id)
    if not group or user.is_admin:
        return

    membership = get_membership(db, group.id, user.id)
    if not (membership and membership.is_active):
        raise GroupPermissionError("Not a member of this group")


def build_leaderboard(
    db: Session,
    group_id: Optional[int],
    rules: ScoringRules,
    now: datetime
) -> list[dict]:
    """Ranking for a group, or for every player when no group is given."""
    member_ids = load_member_ids(db, group_id) if group_id is not None else None
    players = load_players(db, member_ids)
    entries = rank_players(players, load_matches(db), member_ids, rules, now)
    return [entry.to_dict() for entry in entries]


@router.get("/leaderboard")
async def leaderboard(
    group_id: Optional[int] = None,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session),
    now: datetime = Depends(get_now),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    if group_id is not None:
        check_group_access(db, group_id, current_user)
    return {
        "group_id": group_id,
        "entries": build_leaderboard(db, group_id, rules, now)
    }


@router.get("/groups/{group_id}/leaderboard")
async def group_leaderboard(
    group_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session),
    now: datetime = Depends(get_now),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    check_group_access(db, group_id, current_user)
    return {
        "group_id": group_id,
        "entries": build_leaderboard(db, group_id, rules, now)
    }
