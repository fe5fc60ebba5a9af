from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session

from ..database import get_session
from ..dependencies import require_admin
from ..models import Match, User
from ..services.results import record_result

router = APIRouter(prefix="/api/admin", tags=["admin"])


class ResultInput(BaseModel):
    home_score: int
    away_score: int
    force: bool = False


@router.post("/matches/{match_id}/result")
async def post_result(
    match_id: int,
    payload: ResultInput,
    admin_user: User = Depends(require_admin),
    db: Session = Depends(get_session)
):
    """Record the official result of a match."""
    match = db.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")

    match = record_result(db, match, payload.home_score, payload.away_score, force=payload.force)
    return {
        "id": match.id,
        "actual_home_score": match.actual_home_score,
        "actual_away_score": match.actual_away_score
    }
