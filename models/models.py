"""Enums and SQLAlchemy ORM models for the wrestling program simulator."""

from __future__ import annotations

import enum
from datetime import date
from typing import Optional

from sqlalchemy import (
    Column, Date, Float, Index, Integer, String, Text, CheckConstraint
)
from sqlalchemy.orm import Mapped

from .database import Base


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class WeightClass(int, enum.Enum):
    """The ladder, in bout order."""
    W125 = 125
    W133 = 133
    W141 = 141
    W149 = 149
    W157 = 157
    W165 = 165
    W174 = 174
    W184 = 184
    W197 = 197
    W285 = 285

    @classmethod
    def ladder(cls) -> list["WeightClass"]:
        return sorted(cls, key=int)

    def lower(self) -> Optional["WeightClass"]:
        ladder = WeightClass.ladder()
        idx = ladder.index(self)
        return ladder[idx - 1] if idx > 0 else None


class WinMethod(str, enum.Enum):
    DECISION = "decision"
    MAJOR = "major"
    TECH_FALL = "tech fall"
    PIN = "pin"
    FORFEIT = "forfeit"


class WinnerSide(str, enum.Enum):
    A = "A"
    B = "B"
    NONE = "none"


class InjuryKind(str, enum.Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class Strategy(str, enum.Enum):
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"


class ModifierType(str, enum.Enum):
    PUSH = "push"
    SOLID = "solid"


class DualOutcome(str, enum.Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    TIE = "TIE"


class LiveStatus(str, enum.Enum):
    IDLE = "Idle"
    ACTIVE = "Active"
    COMPLETE = "Complete"


class Attribute(str, enum.Enum):
    NEUTRAL = "neutral"
    TOP = "top"
    BOTTOM = "bottom"
    STRENGTH = "strength"
    CONDITIONING = "conditioning"
    TECHNIQUE = "technique"


# ---------------------------------------------------------------------------
# Wrestler
# ---------------------------------------------------------------------------

class WrestlerRecord(Base):
    """A persisted wrestler profile, including transient condition."""

    __tablename__ = "wrestlers"

    id: Mapped[str] = Column(String(36), primary_key=True)
    name: Mapped[str] = Column(String(100), nullable=False)
    weight_class: Mapped[int] = Column(Integer, nullable=False)

    # Skill attributes (1-99)
    neutral: Mapped[int] = Column(Integer, nullable=False)
    top: Mapped[int] = Column(Integer, nullable=False)
    bottom: Mapped[int] = Column(Integer, nullable=False)
    strength: Mapped[int] = Column(Integer, nullable=False)
    conditioning: Mapped[int] = Column(Integer, nullable=False)
    technique: Mapped[int] = Column(Integer, nullable=False)

    # Condition (0-100)
    morale: Mapped[float] = Column(Float, default=70.0)
    health: Mapped[float] = Column(Float, default=100.0)
    fatigue: Mapped[float] = Column(Float, default=20.0)

    injury_kind: Mapped[Optional[str]] = Column(String(10), nullable=True)  # InjuryKind value, checked on load
    injury_days: Mapped[int] = Column(Integer, default=0)

    form: Mapped[int] = Column(Integer, default=0)
    form_days: Mapped[int] = Column(Integer, default=0)
    potential: Mapped[int] = Column(Integer, default=99)
    class_year: Mapped[Optional[str]] = Column(String(2), nullable=True)

    __table_args__ = (
        Index("ix_wrestler_weight_class", "weight_class"),
        CheckConstraint("form BETWEEN -2 AND 2"),
    )

    def __repr__(self) -> str:
        return f"<WrestlerRecord {self.name} ({self.weight_class})>"


# ---------------------------------------------------------------------------
# League standings
# ---------------------------------------------------------------------------

class LeagueTeamRecord(Base):
    """One standings row per program name."""

    __tablename__ = "league_teams"

    id: Mapped[int] = Column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = Column(String(120), nullable=False, unique=True)
    wins: Mapped[int] = Column(Integer, default=0)
    ties: Mapped[int] = Column(Integer, default=0)
    losses: Mapped[int] = Column(Integer, default=0)
    points_for: Mapped[int] = Column(Integer, default=0)
    points_against: Mapped[int] = Column(Integer, default=0)
    rating: Mapped[float] = Column(Float, default=1200.0)
    prestige: Mapped[float] = Column(Float, default=80.0)
    last_result: Mapped[Optional[str]] = Column(String(1), nullable=True)

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"

    def __repr__(self) -> str:
        return f"<LeagueTeamRecord {self.name} {self.record} rating={self.rating:.1f}>"


# ---------------------------------------------------------------------------
# Dual meets
# ---------------------------------------------------------------------------

class DualMeetRecord(Base):
    """A completed dual, stored with its bout log as JSON."""

    __tablename__ = "dual_meets"

    id: Mapped[int] = Column(Integer, primary_key=True, autoincrement=True)
    team_a: Mapped[str] = Column(String(120), nullable=False)
    team_b: Mapped[str] = Column(String(120), nullable=False)
    score_a: Mapped[int] = Column(Integer, nullable=False)
    score_b: Mapped[int] = Column(Integer, nullable=False)
    meet_date: Mapped[date] = Column(Date, nullable=False)
    bouts: Mapped[str] = Column(Text, default="[]")
    log: Mapped[str] = Column(Text, default="")

    __table_args__ = (
        Index("ix_dual_meet_date", "meet_date"),
    )

    def __repr__(self) -> str:
        return f"<DualMeetRecord {self.team_a} {self.score_a}-{self.score_b} {self.team_b}>"
