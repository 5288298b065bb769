"""Dual meet scoring: walks the ladder and totals team points."""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from models.models import DualOutcome, WeightClass, WinMethod, WinnerSide
from simulation.config import (
    ATTRITION_FATIGUE, ATTRITION_HEALTH, CONDITION_MAX, HEALTH_FLOOR, MORALE_SWING,
)
from simulation.entities import (
    BoutResult, DualResult, MatchResult, Team, WrestlerProfile, clamp_stat,
)
from simulation.match_engine import simulate_match, team_points_for_method, tick_form

logger = logging.getLogger(__name__)

_RULE = "--------------------------------"

MatchSimulator = Callable[[WrestlerProfile, WrestlerProfile, random.Random], MatchResult]


def forfeit_bout(
    weight_class: WeightClass,
    a: Optional[WrestlerProfile],
    b: Optional[WrestlerProfile],
    team_name: str,
) -> BoutResult:
    """Bout for a slot fielded by exactly one side."""
    side = WinnerSide.A if a is not None else WinnerSide.B
    pts = team_points_for_method(WinMethod.FORFEIT)
    present = a if a is not None else b
    return BoutResult(
        weight_class=weight_class,
        a=a,
        b=b,
        winner_side=side,
        method=WinMethod.FORFEIT,
        summary=f"{present.name} wins by forfeit for {team_name}",
        points_a=pts if side is WinnerSide.A else 0,
        points_b=pts if side is WinnerSide.B else 0,
    )


def contested_bout(weight_class: WeightClass, a: WrestlerProfile, b: WrestlerProfile,
                   match: MatchResult) -> BoutResult:
    pts = team_points_for_method(match.method)
    return BoutResult(
        weight_class=weight_class,
        a=a,
        b=b,
        winner_side=match.winner_side,
        method=match.method,
        summary=match.summary,
        points_a=pts if match.winner_side is WinnerSide.A else 0,
        points_b=pts if match.winner_side is WinnerSide.B else 0,
    )


def simulate_dual(
    team_a: Team,
    team_b: Team,
    rng: Optional[random.Random] = None,
    weight_classes: Optional[list[WeightClass]] = None,
    match_simulator: Optional[MatchSimulator] = None,
) -> DualResult:
    """Score a dual between two teams across the ladder."""
    rng = rng or random.Random()
    ladder = weight_classes or WeightClass.ladder()
    simulate = match_simulator or simulate_match

    result = DualResult(team_a=team_a.name, team_b=team_b.name)
    result.log.append(f"{team_a.name} vs {team_b.name}")
    result.log.append(_RULE)

    for wc in ladder:
        a = team_a.at(wc)
        b = team_b.at(wc)

        if a is None and b is None:
            result.log.append(f"{int(wc)}: open on both sides, no bout")
            continue

        if a is None or b is None:
            winner_team = team_a.name if a is not None else team_b.name
            bout = forfeit_bout(wc, a, b, winner_team)
            present = a if a is not None else b
            result.log.append(f"{int(wc)}: {winner_team} wins by forfeit (6-0) - {present.name}")
        else:
            match = simulate(a, b, rng)
            bout = contested_bout(wc, a, b, match)
            winner_team = team_a.name if bout.winner_side is WinnerSide.A else team_b.name
            pts = bout.points_a + bout.points_b
            result.log.append(f"{int(wc)}: {match.summary} ({winner_team} +{pts})")

        result.score_a += bout.points_a
        result.score_b += bout.points_b
        result.bouts.append(bout)

    result.log.append(_RULE)
    result.log.append(
        f"Final Team Score: {team_a.name} {result.score_a} - {result.score_b} {team_b.name}"
    )
    logger.info("Dual %s %d - %d %s", team_a.name, result.score_a, result.score_b, team_b.name)
    return result


def apply_post_meet_attrition(roster: list[WrestlerProfile], outcome: DualOutcome) -> None:
    """Wear on every roster member after a dual, win or lose."""
    swing = MORALE_SWING[outcome.value]
    for w in roster:
        w.fatigue = min(CONDITION_MAX, w.fatigue + ATTRITION_FATIGUE)
        w.health = max(HEALTH_FLOOR, w.health - ATTRITION_HEALTH)
        if w.injury is not None and w.injury.days > 0:
            w.injury.days = max(0, w.injury.days - 1)
        w.morale = clamp_stat(w.morale + swing)
        tick_form(w)
