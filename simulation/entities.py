"""
Entity model for the wrestling simulation engine.

Plain dataclasses only. The engine works with these, never with ORM rows;
``simulation.persistence`` converts between the two.
"""

from __future__ import annotations

import copy
import random
from dataclasses import dataclass, field
from typing import Optional

from models.models import (
    Attribute, DualOutcome, InjuryKind, LiveStatus, ModifierType, Strategy,
    WeightClass, WinMethod, WinnerSide,
)
from simulation.config import (
    ATTR_MAX, ATTR_MIN, DEFAULT_PRESTIGE, DEFAULT_RATING, MODIFIER_USES,
)


def clamp_stat(value: float) -> int:
    """Clamp a skill attribute into [1, 99]."""
    return int(max(ATTR_MIN, min(ATTR_MAX, round(value))))


# ---------------------------------------------------------------------------
# Wrestlers and teams
# ---------------------------------------------------------------------------

@dataclass
class Injury:
    kind: InjuryKind
    days: int = 0

    @property
    def active(self) -> bool:
        return self.days > 0


@dataclass
class WrestlerProfile:
    """A wrestler: fixed weight class, six skills, and transient condition."""
    id: str
    name: str
    weight_class: WeightClass
    neutral: int
    top: int
    bottom: int
    strength: int
    conditioning: int
    technique: int

    # Condition (0-100)
    morale: float = 70.0
    health: float = 100.0
    fatigue: float = 20.0
    injury: Optional[Injury] = None

    # Momentum (-2 cold to +2 hot) and bouts until it wears off
    form: int = 0
    form_days: int = 0

    potential: int = ATTR_MAX
    class_year: Optional[str] = None

    def get(self, attr: Attribute) -> int:
        """Clamped read of one skill attribute."""
        if attr is Attribute.NEUTRAL:
            raw = self.neutral
        elif attr is Attribute.TOP:
            raw = self.top
        elif attr is Attribute.BOTTOM:
            raw = self.bottom
        elif attr is Attribute.STRENGTH:
            raw = self.strength
        elif attr is Attribute.CONDITIONING:
            raw = self.conditioning
        elif attr is Attribute.TECHNIQUE:
            raw = self.technique
        else:
            raise ValueError(f"Unknown attribute: {attr!r}")
        return clamp_stat(raw)

    def set(self, attr: Attribute, value: float) -> None:
        value = clamp_stat(value)
        if attr is Attribute.NEUTRAL:
            self.neutral = value
        elif attr is Attribute.TOP:
            self.top = value
        elif attr is Attribute.BOTTOM:
            self.bottom = value
        elif attr is Attribute.STRENGTH:
            self.strength = value
        elif attr is Attribute.CONDITIONING:
            self.conditioning = value
        elif attr is Attribute.TECHNIQUE:
            self.technique = value
        else:
            raise ValueError(f"Unknown attribute: {attr!r}")

    @property
    def is_injured(self) -> bool:
        return self.injury is not None and self.injury.active

    @property
    def is_majorly_injured(self) -> bool:
        return self.is_injured and self.injury.kind is InjuryKind.MAJOR

    def clone(self) -> "WrestlerProfile":
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"<WrestlerProfile {self.name} ({int(self.weight_class)})>"


@dataclass
class Team:
    """A team name plus at most one wrestler per weight class.

    Holds references; never copies or owns the profiles.
    """
    name: str
    lineup: dict[WeightClass, WrestlerProfile] = field(default_factory=dict)

    @classmethod
    def from_wrestlers(cls, name: str, wrestlers: list[WrestlerProfile]) -> "Team":
        lineup: dict[WeightClass, WrestlerProfile] = {}
        for w in wrestlers:
            lineup.setdefault(w.weight_class, w)
        return cls(name=name, lineup=lineup)

    def at(self, weight_class: WeightClass) -> Optional[WrestlerProfile]:
        return self.lineup.get(weight_class)


# ---------------------------------------------------------------------------
# Bout / dual results
# ---------------------------------------------------------------------------

@dataclass
class MatchResult:
    """Outcome of one contested bout."""
    winner: WrestlerProfile
    loser: WrestlerProfile
    winner_side: WinnerSide
    method: WinMethod
    margin: float
    summary: str


@dataclass
class BoutResult:
    """One ladder slot of a dual. ``None`` participants are open slots."""
    weight_class: WeightClass
    winner_side: WinnerSide
    method: WinMethod
    summary: str
    a: Optional[WrestlerProfile] = None
    b: Optional[WrestlerProfile] = None
    points_a: int = 0
    points_b: int = 0

    @property
    def is_forfeit(self) -> bool:
        return self.method is WinMethod.FORFEIT


@dataclass
class DualResult:
    team_a: str
    team_b: str
    score_a: int = 0
    score_b: int = 0
    bouts: list[BoutResult] = field(default_factory=list)
    log: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.log)

    @property
    def outcome(self) -> DualOutcome:
        """Outcome from team A's point of view."""
        if self.score_a == self.score_b:
            return DualOutcome.TIE
        return DualOutcome.WIN if self.score_a > self.score_b else DualOutcome.LOSS

    @property
    def winner_name(self) -> str:
        # Ties advance team A, as the bracket does
        return self.team_a if self.score_a >= self.score_b else self.team_b


# ---------------------------------------------------------------------------
# Tournament
# ---------------------------------------------------------------------------

@dataclass
class TournamentMatch:
    round: str  # "Quarterfinal" | "Semifinal" | "Final"
    a: WrestlerProfile
    b: WrestlerProfile
    result: MatchResult


@dataclass
class WeightBracket:
    weight_class: WeightClass
    quarterfinals: list[TournamentMatch] = field(default_factory=list)
    semifinals: list[TournamentMatch] = field(default_factory=list)
    final: Optional[TournamentMatch] = None

    @property
    def champion(self) -> Optional[str]:
        return self.final.result.winner.name if self.final else None

    @property
    def runner_up(self) -> Optional[str]:
        return self.final.result.loser.name if self.final else None

    @property
    def matches(self) -> list[TournamentMatch]:
        tail = [self.final] if self.final else []
        return self.quarterfinals + self.semifinals + tail


@dataclass
class Placing:
    weight_class: WeightClass
    champion: Optional[str] = None
    runner_up: Optional[str] = None


@dataclass
class TournamentBracket:
    weights: list[WeightBracket] = field(default_factory=list)
    placings: list[Placing] = field(default_factory=list)


# ---------------------------------------------------------------------------
# League
# ---------------------------------------------------------------------------

@dataclass
class LeagueTeam:
    name: str
    wins: int = 0
    ties: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0
    rating: float = DEFAULT_RATING
    prestige: float = DEFAULT_PRESTIGE
    last_result: Optional[str] = None

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        return self.wins / self.games if self.games else 0.0

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"


@dataclass
class PostseasonResult:
    seeds: list[str]
    semifinal1: DualResult
    semifinal2: DualResult
    final: DualResult
    champion: str

    @property
    def log(self) -> str:
        s1, s2, f = self.semifinal1, self.semifinal2, self.final
        return (
            f"Semis: {s1.team_a} {s1.score_a}-{s1.score_b} {s1.team_b} | "
            f"{s2.team_a} {s2.score_a}-{s2.score_b} {s2.team_b}\n"
            f"Final: {f.team_a} {f.score_a}-{f.score_b} {f.team_b}\n"
            f"Champion: {self.champion}"
        )


# ---------------------------------------------------------------------------
# Live dual
# ---------------------------------------------------------------------------

@dataclass
class CoachingModifier:
    type: ModifierType
    remaining: int = MODIFIER_USES


@dataclass
class LiveBoutSlot:
    weight_class: WeightClass
    a: Optional[WrestlerProfile] = None
    b: Optional[WrestlerProfile] = None
    result: Optional[BoutResult] = None


@dataclass
class LiveDualState:
    my_team: Team
    opponent: Team
    bouts: list[LiveBoutSlot] = field(default_factory=list)
    cursor: int = 0
    score_a: int = 0
    score_b: int = 0
    strategy: Strategy = Strategy.BALANCED
    modifiers: list[CoachingModifier] = field(default_factory=list)
    status: LiveStatus = LiveStatus.ACTIVE
    is_postseason: bool = False
    training_note: Optional[str] = None

    @property
    def current(self) -> Optional[LiveBoutSlot]:
        return self.bouts[self.cursor] if self.cursor < len(self.bouts) else None

    @property
    def done(self) -> bool:
        return self.cursor >= len(self.bouts)


# ---------------------------------------------------------------------------
# Season context
# ---------------------------------------------------------------------------

@dataclass
class SeasonContext:
    """Everything a season carries between engine calls.

    Passed explicitly into engine entry points instead of living in
    module-level registries.
    """
    program_name: str = "My Team"
    program_prestige: float = DEFAULT_PRESTIGE
    roster: list[WrestlerProfile] = field(default_factory=list)
    lineup: dict[WeightClass, Optional[str]] = field(default_factory=dict)
    league: dict[str, LeagueTeam] = field(default_factory=dict)
    allow_bump: bool = False
    rng: random.Random = field(default_factory=random.Random)
    postseason: Optional[PostseasonResult] = None
    season_wins: int = 0
    season_losses: int = 0
    season_ties: int = 0
    summaries: list[str] = field(default_factory=list)

    def find_wrestler(self, wrestler_id: Optional[str]) -> Optional[WrestlerProfile]:
        if not wrestler_id:
            return None
        return next((w for w in self.roster if w.id == wrestler_id), None)
