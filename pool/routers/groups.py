from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session, select

from ..database import get_session
from ..dependencies import require_user
from ..models import Group, GroupMembership, GroupStatus, User
from ..services.groups import archive_group, create_group, get_membership, join_group, list_user_groups

router = APIRouter(prefix="/api/groups", tags=["groups"])


class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = None
    language_default: str = "pt"


class GroupJoin(BaseModel):
    code: str


class GroupResponse(BaseModel):
    id: int
    code: str
    name: str
    initials: str
    description: Optional[str] = None
    language_default: str
    owner_user_id: int
    status: str
    member_count: int
    created_at: datetime


def group_response(db: Session, group: Group) -> GroupResponse:
    members = db.exec(
        select(GroupMembership).where(
            GroupMembership.group_id == group.id,
            GroupMembership.is_active == True  # noqa: E712
        )
    ).all()
    return GroupResponse(
        id=group.id,
        code=group.code,
        name=group.name,
        initials=group.initials,
        description=group.description,
        language_default=group.language_default,
        owner_user_id=group.owner_user_id,
        status=GroupStatus(group.status).value,
        member_count=len(members),
        created_at=group.created_at
    )


def get_group_or_404(db: Session, group_id: int) -> Group:
    group = db.get(Group, group_id)
    if not group:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    return group


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def post_group(
    payload: GroupCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    if not payload.name.strip():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Group name is required")

    group = create_group(
        db,
        current_user.id,
        payload.name,
        description=payload.description,
        language_default=payload.language_default
    )
    return group_response(db, group)


@router.post("/join", response_model=GroupResponse)
async def post_join(
    payload: GroupJoin,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    group = join_group(db, current_user.id, payload.code)
    return group_response(db, group)


@router.get("", response_model=list[GroupResponse])
async def get_my_groups(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    return [group_response(db, group) for group in list_user_groups(db, current_user.id)]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    group = get_group_or_404(db, group_id)
    membership = get_membership(db, group.id, current_user.id)
    if not (membership and membership.is_active):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this group")
    return group_response(db, group)


@router.post("/{group_id}/archive", response_model=GroupResponse)
async def post_archive(
    group_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_session)
):
    group = archive_group(db, get_group_or_404(db, group_id), current_user.id)
    return group_response(db, group)
