from .user import User
from .session import Session
from .team import Team
from .match import Match
from .prediction import Prediction
from .group import Group, GroupMembership, GroupRole, GroupStatus

__all__ = [
    "User",
    "Session",
    "Team",
    "Match",
    "Prediction",
    "Group",
    "GroupMembership",
    "GroupRole",
    "GroupStatus",
]
