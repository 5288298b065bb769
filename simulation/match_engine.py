"""
Bout simulation engine for the wrestling program simulator.

Completely decoupled from Flask and the database: works on
``WrestlerProfile`` snapshots and an injected ``random.Random``.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from models.models import Attribute, ModifierType, WinMethod, WinnerSide
from simulation.config import (
    COMPOSITE_WEIGHTS, FATIGUE_FACTOR, FORM_FACTOR, FORM_MAX, FORM_MIN,
    FORM_WINDOW, HEALTH_FACTOR, HEALTH_PIVOT, INJURY_PENALTIES, MAJOR_MARGIN,
    MORALE_FACTOR, MORALE_PIVOT, PIN_MARGIN, PUSH_CONDITIONING_BONUS,
    PUSH_NEUTRAL_BONUS, RANDOM_SPREAD, SOLID_PIN_MARGIN, STYLE_SCALE,
    STYLE_WEIGHTS, TEAM_POINTS, TECH_FALL_MARGIN,
)
from simulation.entities import CoachingModifier, MatchResult, WrestlerProfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Scoring model
# ---------------------------------------------------------------------------

def overall_score(w: WrestlerProfile) -> float:
    """Weighted skill composite. Also used to rank lineup candidates."""
    return (
        w.get(Attribute.NEUTRAL) * COMPOSITE_WEIGHTS["neutral"]
        + w.get(Attribute.TOP) * COMPOSITE_WEIGHTS["top"]
        + w.get(Attribute.BOTTOM) * COMPOSITE_WEIGHTS["bottom"]
        + w.get(Attribute.TECHNIQUE) * COMPOSITE_WEIGHTS["technique"]
        + w.get(Attribute.STRENGTH) * COMPOSITE_WEIGHTS["strength"]
        + w.get(Attribute.CONDITIONING) * COMPOSITE_WEIGHTS["conditioning"]
    )


def style_score(w: WrestlerProfile) -> float:
    return (
        w.get(Attribute.NEUTRAL) * STYLE_WEIGHTS["neutral"]
        + w.get(Attribute.TOP) * STYLE_WEIGHTS["top"]
        + w.get(Attribute.BOTTOM) * STYLE_WEIGHTS["bottom"]
        + w.get(Attribute.TECHNIQUE) * STYLE_WEIGHTS["technique"]
    )


def injury_penalty(w: WrestlerProfile) -> float:
    if not w.is_injured:
        return 1.0
    return INJURY_PENALTIES[w.injury.kind]


def composite_score(w: WrestlerProfile, strategy_modifier: float = 1.0) -> float:
    """Adjusted score before the random draw."""
    base = (
        overall_score(w)
        + style_score(w) * STYLE_SCALE
        + (w.morale - MORALE_PIVOT) * MORALE_FACTOR
        + (w.health - HEALTH_PIVOT) * HEALTH_FACTOR
        - w.fatigue * FATIGUE_FACTOR
        + w.form * FORM_FACTOR
    )
    return base * injury_penalty(w) * strategy_modifier


def method_for_margin(margin: float, pin_margin: float = PIN_MARGIN) -> WinMethod:
    if margin > pin_margin:
        return WinMethod.PIN
    if margin > TECH_FALL_MARGIN:
        return WinMethod.TECH_FALL
    if margin > MAJOR_MARGIN:
        return WinMethod.MAJOR
    return WinMethod.DECISION


def team_points_for_method(method: WinMethod) -> int:
    return TEAM_POINTS[method]


# ---------------------------------------------------------------------------
# Coaching modifiers
# ---------------------------------------------------------------------------

def effective_profile(
    w: WrestlerProfile, modifiers: Iterable[CoachingModifier]
) -> WrestlerProfile:
    """Snapshot of ``w`` with active coaching modifiers applied.

    Returns a new profile; ``w`` is never touched.
    """
    snapshot = w.clone()
    for mod in modifiers:
        if mod.type is ModifierType.PUSH:
            snapshot.set(Attribute.NEUTRAL, snapshot.get(Attribute.NEUTRAL) + PUSH_NEUTRAL_BONUS)
            snapshot.set(
                Attribute.CONDITIONING,
                snapshot.get(Attribute.CONDITIONING) + PUSH_CONDITIONING_BONUS,
            )
    return snapshot


def pin_margin_for(modifiers: Iterable[CoachingModifier]) -> float:
    if any(m.type is ModifierType.SOLID for m in modifiers):
        return SOLID_PIN_MARGIN
    return PIN_MARGIN


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

def apply_form(winner: WrestlerProfile, loser: WrestlerProfile) -> None:
    winner.form = min(FORM_MAX, winner.form + 1)
    loser.form = max(FORM_MIN, loser.form - 1)
    winner.form_days = FORM_WINDOW
    loser.form_days = FORM_WINDOW


def tick_form(w: WrestlerProfile) -> None:
    """Count down one bout of the form window; form resets when it runs out."""
    if w.form_days > 0:
        w.form_days -= 1
        if w.form_days == 0:
            w.form = 0


# ---------------------------------------------------------------------------
# Core engine
# ---------------------------------------------------------------------------

def resolve_bout(
    a: WrestlerProfile,
    b: WrestlerProfile,
    rng: random.Random,
    strategy_modifier: float = 1.0,
    pin_margin: float = PIN_MARGIN,
    a_effective: Optional[WrestlerProfile] = None,
) -> MatchResult:
    """Score one bout without side effects.

    ``a_effective`` lets the caller score side A from a modified snapshot
    while the result still names the real profiles.
    """
    score_a = composite_score(a_effective or a, strategy_modifier) + rng.random() * RANDOM_SPREAD
    score_b = composite_score(b) + rng.random() * RANDOM_SPREAD

    if score_a >= score_b:
        winner, loser, side = a, b, WinnerSide.A
    else:
        winner, loser, side = b, a, WinnerSide.B

    margin = abs(score_a - score_b)
    method = method_for_margin(margin, pin_margin)
    summary = f"{winner.name} defeats {loser.name} by {method.value}."
    logger.debug(
        "%d: %s %.2f vs %s %.2f -> %s", int(a.weight_class), a.name, score_a,
        b.name, score_b, method.value,
    )
    return MatchResult(
        winner=winner,
        loser=loser,
        winner_side=side,
        method=method,
        margin=margin,
        summary=summary,
    )


def simulate_match(
    a: WrestlerProfile,
    b: WrestlerProfile,
    rng: Optional[random.Random] = None,
    strategy_modifier: float = 1.0,
) -> MatchResult:
    """Resolve one bout between two present wrestlers.

    ``strategy_modifier`` scales side A only. Updates both wrestlers' form.
    """
    rng = rng or random.Random()
    result = resolve_bout(a, b, rng, strategy_modifier=strategy_modifier)
    apply_form(result.winner, result.loser)
    return result
