from typing import Optional
from sqlmodel import SQLModel, Field


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(unique=True, index=True, max_length=3)  # e.g., "BRA", "ARG"

    # Localized display names
    name_pt: str
    name_en: str
    name_es: str

    flag: Optional[str] = Field(default=None)  # emoji glyph
    color: Optional[str] = Field(default=None, max_length=7)  # accent hex, e.g. "#FFDF00"

    def display_name(self, language: str = "en") -> str:
        return getattr(self, f"name_{language}", None) or self.name_en
