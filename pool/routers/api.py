from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session, select

from ..config import LIVE_WINDOW_MINUTES, LOCK_MINUTES, MAX_JOKERS
from ..database import get_session
from ..dependencies import get_now, get_scoring_rules, require_user
from ..models import Match, Prediction, Team, User
from ..services.lifecycle import match_phase
from ..services.lock import can_edit, lock_deadline
from ..services.predictions import delete_prediction, get_prediction, upsert_prediction
from ..services.scoring import JOKER_MULTIPLIER, ScoringRules, evaluate_prediction
from ..services.snapshot import load_matches

router = APIRouter(prefix="/api")


class TeamResponse(BaseModel):
    id: int
    code: str
    name: str
    flag: Optional[str] = None
    color: Optional[str] = None


class PredictionUpsert(BaseModel):
    """Schema for creating or editing a prediction."""
    home_score: int
    away_score: int
    is_joker: bool = False


class PredictionResponse(BaseModel):
    id: int
    match_id: int
    predicted_home_score: int
    predicted_away_score: int
    is_joker: bool
    points: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime


class MatchResponse(BaseModel):
    id: int
    stage: str
    venue: str
    start_time: datetime
    lock_deadline: datetime
    phase: str
    can_edit: bool
    home_team: TeamResponse
    away_team: TeamResponse
    actual_home_score: Optional[int] = None
    actual_away_score: Optional[int] = None
    prediction: Optional[PredictionResponse] = None


def team_response(team: Team, language: str = "en") -> TeamResponse:
    return TeamResponse(
        id=team.id,
        code=team.code,
        name=team.display_name(language),
        flag=team.flag,
        color=team.color
    )


def prediction_response(
    prediction: Prediction,
    match: Optional[Match],
    rules: ScoringRules,
    now: datetime
) -> PredictionResponse:
    scoring = {"points": None, "status": "pending"}
    if match is not None:
        scoring = evaluate_prediction(prediction, match, rules, now)

    return PredictionResponse(
        id=prediction.id,
        match_id=prediction.match_id,
        predicted_home_score=prediction.predicted_home_score,
        predicted_away_score=prediction.predicted_away_score,
        is_joker=prediction.is_joker,
        points=scoring["points"],
        status=scoring["status"],
        created_at=prediction.created_at,
        updated_at=prediction.updated_at
    )


def match_response(
    match: Match,
    teams: dict,
    prediction: Optional[Prediction],
    rules: ScoringRules,
    now: datetime,
    language: str = "en"
) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        stage=match.stage,
        venue=match.venue,
        start_time=match.start_time,
        lock_deadline=lock_deadline(match),
        phase=match_phase(match, now).value,
        can_edit=can_edit(match, now),
        home_team=team_response(teams[match.home_team_id], language),
        away_team=team_response(teams[match.away_team_id], language),
        actual_home_score=match.actual_home_score,
        actual_away_score=match.actual_away_score,
        prediction=prediction_response(prediction, match, rules, now) if prediction else None
    )


def get_match_or_404(db: Session, match_id: int) -> Match:
    match = db.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    return match


@router.get("/teams", response_model=List[TeamResponse])
async def get_teams(
    lang: str = "en",
    db: Session = Depends(get_session)
):
    teams = db.exec(select(Team).order_by(Team.code)).all()
    return [team_response(team, lang) for team in teams]


@router.get("/matches", response_model=List[MatchResponse])
async def get_matches(
    lang: str = "en",
    db: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    """All matches with phase, lock state and the caller's prediction."""
    teams = {team.id: team for team in db.exec(select(Team)).all()}
    predictions = db.exec(select(Prediction).where(Prediction.user_id == current_user.id)).all()
    predictions_map = {prediction.match_id: prediction for prediction in predictions}

    return [
        match_response(match, teams, predictions_map.get(match.id), rules, now, lang)
        for match in load_matches(db)
    ]


@router.get("/matches/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: int,
    lang: str = "en",
    db: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    match = get_match_or_404(db, match_id)
    teams = {
        match.home_team_id: db.get(Team, match.home_team_id),
        match.away_team_id: db.get(Team, match.away_team_id)
    }
    prediction = get_prediction(db, current_user.id, match.id)
    return match_response(match, teams, prediction, rules, now, lang)


@router.get("/predictions", response_model=List[PredictionResponse])
async def get_user_predictions(
    db: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    """Get all predictions for the current user."""
    predictions = db.exec(
        select(Prediction).where(Prediction.user_id == current_user.id).order_by(Prediction.match_id)
    ).all()
    matches = {match.id: match for match in load_matches(db)}

    return [
        prediction_response(prediction, matches.get(prediction.match_id), rules, now)
        for prediction in predictions
    ]


@router.put("/predictions/{match_id}", response_model=PredictionResponse)
async def put_prediction(
    match_id: int,
    payload: PredictionUpsert,
    db: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    """Create or update a prediction while the match is open."""
    match = get_match_or_404(db, match_id)
    prediction = upsert_prediction(
        db,
        current_user.id,
        match,
        payload.home_score,
        payload.away_score,
        is_joker=payload.is_joker,
        now=now
    )
    return prediction_response(prediction, match, rules, now)


@router.delete("/predictions/{match_id}")
async def remove_prediction(
    match_id: int,
    db: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    now: datetime = Depends(get_now)
):
    match = get_match_or_404(db, match_id)
    if not delete_prediction(db, current_user.id, match, now):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prediction not found")
    return {"message": "Prediction deleted successfully"}


@router.get("/rules")
async def get_rules(rules: ScoringRules = Depends(get_scoring_rules)):
    """Scoring weights and timing policy currently in force."""
    return {
        "scoring": rules.model_dump(by_alias=True),
        "joker_multiplier": JOKER_MULTIPLIER,
        "max_jokers": MAX_JOKERS,
        "lock_minutes": LOCK_MINUTES,
        "live_window_minutes": LIVE_WINDOW_MINUTES,
        "tie_break": ["total_points", "exact_hits", "registration_order"]
    }
