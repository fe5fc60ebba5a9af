from datetime import datetime, UTC
from typing import Optional
from sqlmodel import SQLModel, Field


class Match(SQLModel, table=True):
    __tablename__ = "matches"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Home/away identity is fixed at creation
    home_team_id: int = Field(foreign_key="teams.id")
    away_team_id: int = Field(foreign_key="teams.id")

    start_time: datetime = Field(index=True)
    venue: str = Field(default="")
    stage: str = Field(default="", index=True)  # "Group A", "Round of 16", ...

    # Official result, both or neither (set once by admin)
    actual_home_score: Optional[int] = Field(default=None)
    actual_away_score: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def has_result(self) -> bool:
        return self.actual_home_score is not None and self.actual_away_score is not None
