"""
Tuning constants for the wrestling simulation engine.

Engine modules import these directly; nothing here reads the environment.
"""

from __future__ import annotations

from models.models import InjuryKind, ModifierType, Strategy, WinMethod

# -------- Attributes --------
ATTR_MIN = 1
ATTR_MAX = 99
CONDITION_MIN = 0
CONDITION_MAX = 100

# Composite base weights (neutral, top, bottom, technique, strength, conditioning)
COMPOSITE_WEIGHTS = {
    "neutral": 0.25,
    "top": 0.20,
    "bottom": 0.20,
    "technique": 0.20,
    "strength": 0.10,
    "conditioning": 0.05,
}

# Secondary style term, scaled by STYLE_SCALE
STYLE_WEIGHTS = {
    "neutral": 0.30,
    "top": 0.25,
    "bottom": 0.25,
    "technique": 0.25,
}
STYLE_SCALE = 0.05

MORALE_PIVOT = 70
MORALE_FACTOR = 0.1
HEALTH_PIVOT = 90
HEALTH_FACTOR = 0.05
FATIGUE_FACTOR = 0.1
FORM_FACTOR = 1.2

INJURY_PENALTIES: dict[InjuryKind, float] = {
    InjuryKind.MAJOR: 0.6,
    InjuryKind.MODERATE: 0.8,
    InjuryKind.MINOR: 0.9,
}

# Each side adds uniform [0, RANDOM_SPREAD)
RANDOM_SPREAD = 10

# -------- Bout methods (margin strictly greater than) --------
PIN_MARGIN = 15
SOLID_PIN_MARGIN = 18
TECH_FALL_MARGIN = 10
MAJOR_MARGIN = 6

TEAM_POINTS: dict[WinMethod, int] = {
    WinMethod.PIN: 6,
    WinMethod.FORFEIT: 6,
    WinMethod.TECH_FALL: 5,
    WinMethod.MAJOR: 4,
    WinMethod.DECISION: 3,
}

# -------- Form --------
FORM_MIN = -2
FORM_MAX = 2
FORM_WINDOW = 5

# -------- Tournament --------
BRACKET_SIZE = 8
TOURNAMENT_PRESTIGE = 75

# -------- League --------
ELO_K = 20
DEFAULT_RATING = 1200.0
DEFAULT_PRESTIGE = 80.0
PRESTIGE_RATING_SCALE = 10
POSTSEASON_FIELD = 4
CHAMPION_PRESTIGE_BONUS = 3
WINNING_SEASON_PCT = 0.6
WINNING_SEASON_BONUS = 1
LOSING_SEASON_PCT = 0.3
LOSING_SEASON_PENALTY = -2

# -------- Live dual --------
STRATEGY_MULTIPLIERS: dict[Strategy, float] = {
    Strategy.AGGRESSIVE: 1.05,
    Strategy.CONSERVATIVE: 0.95,
    Strategy.BALANCED: 1.0,
}
MODIFIER_USES = 2
PUSH_NEUTRAL_BONUS = 2
PUSH_CONDITIONING_BONUS = 1
MODIFIER_LABELS: dict[ModifierType, str] = {
    ModifierType.PUSH: "Pace push set for next bouts.",
    ModifierType.SOLID: "Staying solid for next bouts.",
}

# -------- Post-meet attrition --------
ATTRITION_FATIGUE = 12
ATTRITION_HEALTH = 3
HEALTH_FLOOR = 40
MORALE_SWING = {"WIN": 3, "TIE": 0, "LOSS": -2}

# -------- Opponent generation --------
OPPONENT_VARIANCE = 8
OPPONENT_CONDITION = {"morale": 70, "health": 95, "fatigue": 25}
TOURNAMENT_CONDITION = {"morale": 70, "health": 95, "fatigue": 20}

DEFAULT_SEED = None
