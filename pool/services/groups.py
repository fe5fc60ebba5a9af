import logging
import random
import string
from datetime import datetime, UTC
from typing import List, Optional

from sqlmodel import Session, select

from .. import config
from ..errors import AlreadyMemberError, GroupNotFoundError, GroupPermissionError
from ..models import Group, GroupMembership, GroupRole, GroupStatus

logger = logging.getLogger(__name__)

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_join_code(db: Session, length: Optional[int] = None) -> str:
    """Generate a random alphanumeric join code not used by any group."""
    length = length or config.JOIN_CODE_LENGTH
    while True:
        code = ''.join(random.choices(JOIN_CODE_ALPHABET, k=length))
        if not db.exec(select(Group).where(Group.code == code)).first():
            return code


def get_membership(db: Session, group_id: int, user_id: int) -> Optional[GroupMembership]:
    statement = select(GroupMembership).where(
        GroupMembership.group_id == group_id,
        GroupMembership.user_id == user_id
    )
    return db.exec(statement).first()


def create_group(
    db: Session,
    owner_id: int,
    name: str,
    description: Optional[str] = None,
    language_default: str = "pt",
) -> Group:
    """Create a group; the creator joins it as OWNER."""
    group = Group(
        code=generate_join_code(db),
        name=name.strip(),
        description=description,
        language_default=language_default,
        owner_user_id=owner_id
    )
    db.add(group)
    db.commit()
    db.refresh(group)

    db.add(GroupMembership(group_id=group.id, user_id=owner_id, role=GroupRole.OWNER))
    db.commit()

    logger.info("User %s created group %s (%s)", owner_id, group.id, group.code)
    return group


def join_group(db: Session, user_id: int, code: str) -> Group:
    statement = select(Group).where(
        Group.code == code.strip().upper(),
        Group.status == GroupStatus.ACTIVE
    )
    group = db.exec(statement).first()
    if not group:
        raise GroupNotFoundError("Invalid join code")

    membership = get_membership(db, group.id, user_id)
    if membership and membership.is_active:
        raise AlreadyMemberError("Already a member of this group")

    if membership:
        membership.is_active = True
        membership.joined_at = datetime.now(UTC)
    else:
        membership = GroupMembership(group_id=group.id, user_id=user_id, role=GroupRole.MEMBER)
    db.add(membership)
    db.commit()

    logger.info("User %s joined group %s", user_id, group.id)
    return group


def list_user_groups(db: Session, user_id: int) -> List[Group]:
    statement = (
        select(Group)
        .join(GroupMembership, GroupMembership.group_id == Group.id)
        .where(
            GroupMembership.user_id == user_id,
            GroupMembership.is_active == True,  # noqa: E712
            Group.status == GroupStatus.ACTIVE
        )
        .order_by(Group.created_at)
    )
    return db.exec(statement).all()


def archive_group(db: Session, group: Group, user_id: int) -> Group:
    if group.owner_user_id != user_id:
        raise GroupPermissionError("Only the owner can archive a group")

    group.status = GroupStatus.ARCHIVED
    group.updated_at = datetime.now(UTC)
    db.add(group)
    db.commit()
    db.refresh(group)

    logger.info("Group %s archived by %s", group.id, user_id)
    return group
