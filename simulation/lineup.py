"""
Lineup selection helpers: validation, auto-fill, team building and
opponent generation.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from models.models import Attribute, WeightClass
from simulation.config import OPPONENT_CONDITION, OPPONENT_VARIANCE
from simulation.dual_meet import simulate_dual
from simulation.entities import DualResult, SeasonContext, Team, WrestlerProfile
from simulation.match_engine import overall_score
from simulation.seed import SCHOOL_NAMES, new_id, random_name

logger = logging.getLogger(__name__)


@dataclass
class LineupReport:
    """Result of checking a lineup; ``missing`` names every unfilled class."""
    ok: bool
    selections: dict[WeightClass, Optional[str]] = field(default_factory=dict)
    missing: list[WeightClass] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.ok:
            return "Lineup ready."
        weights = ", ".join(str(int(wc)) for wc in self.missing)
        return f"Lineup incomplete: no healthy starter or bump at {weights} lbs."


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

def best_candidate_for_weight(
    roster: list[WrestlerProfile],
    weight_class: WeightClass,
    exclude: Optional[set[str]] = None,
    healthy_only: bool = False,
) -> Optional[WrestlerProfile]:
    exclude = exclude or set()
    pool = [
        w for w in roster
        if w.weight_class == weight_class
        and w.id not in exclude
        and not (healthy_only and w.is_majorly_injured)
    ]
    if not pool:
        return None
    return max(pool, key=overall_score)


def auto_fill_lineup(ctx: SeasonContext) -> list[WeightClass]:
    """Fill empty or stale selections with the best wrestler at each class."""
    changed = []
    for wc in WeightClass.ladder():
        if ctx.find_wrestler(ctx.lineup.get(wc)) is not None:
            continue
        best = best_candidate_for_weight(ctx.roster, wc)
        ctx.lineup[wc] = best.id if best else None
        changed.append(wc)
    if changed:
        logger.debug("Auto-filled lineup at %s", [int(wc) for wc in changed])
    return changed


def validate_lineup(ctx: SeasonContext) -> LineupReport:
    """Check every class has a healthy, unique starter, repairing where possible.

    A majorly injured or duplicated selection is replaced by a healthy wrestler
    from the same class, or (with bumping allowed) one from the next lower
    class. Classes that cannot be filled are listed in the report.
    """
    missing: list[WeightClass] = []
    used: set[str] = set()

    for wc in WeightClass.ladder():
        chosen = ctx.find_wrestler(ctx.lineup.get(wc))
        if chosen is not None and chosen.is_majorly_injured:
            chosen = None
        if chosen is not None and chosen.id not in used:
            used.add(chosen.id)
            continue

        same = best_candidate_for_weight(ctx.roster, wc, exclude=used, healthy_only=True)
        if same is not None:
            ctx.lineup[wc] = same.id
            used.add(same.id)
            continue

        lower = wc.lower()
        if ctx.allow_bump and lower is not None:
            bump = best_candidate_for_weight(ctx.roster, lower, exclude=used, healthy_only=True)
            if bump is not None:
                ctx.lineup[wc] = bump.id
                used.add(bump.id)
                continue

        ctx.lineup[wc] = None
        missing.append(wc)

    report = LineupReport(ok=not missing, selections=dict(ctx.lineup), missing=missing)
    if missing:
        logger.warning(report.message)
    return report


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------

def build_team_from_roster(ctx: SeasonContext, name: Optional[str] = None) -> Team:
    """The caller's starters: selection, else best at class, else a bump."""
    team = Team(name=name or ctx.program_name)
    used: set[str] = set()
    for wc in WeightClass.ladder():
        chosen = ctx.find_wrestler(ctx.lineup.get(wc))
        if chosen is None or chosen.id in used:
            chosen = best_candidate_for_weight(ctx.roster, wc, exclude=used)
        if chosen is None and ctx.allow_bump and wc.lower() is not None:
            chosen = best_candidate_for_weight(ctx.roster, wc.lower(), exclude=used)
        if chosen is not None and not chosen.is_majorly_injured:
            team.lineup[wc] = chosen
            used.add(chosen.id)
    return team


def generate_opponent_team(
    base: Team, rng: random.Random, name: Optional[str] = None
) -> Team:
    """A rival shaped like ``base``: each starter re-rolled within a few points."""
    used: set[str] = set()
    rival = Team(name=name or rng.choice(SCHOOL_NAMES))
    for wc, w in base.lineup.items():
        clone = w.clone()
        clone.id = new_id(rng)
        clone.name = random_name(rng, used)
        for attr in Attribute:
            clone.set(attr, w.get(attr) + rng.randint(-OPPONENT_VARIANCE, OPPONENT_VARIANCE))
        clone.morale = OPPONENT_CONDITION["morale"]
        clone.health = OPPONENT_CONDITION["health"]
        clone.fatigue = OPPONENT_CONDITION["fatigue"]
        clone.injury = None
        clone.form = 0
        clone.form_days = 0
        rival.lineup[wc] = clone
    return rival


def build_intra_squad_teams(roster: list[WrestlerProfile]) -> tuple[Team, Team]:
    """Split the roster: best per class wrestles Red, second best Green."""
    red = Team(name="Red")
    green = Team(name="Green")
    for wc in WeightClass.ladder():
        in_class = sorted(
            (w for w in roster if w.weight_class == wc), key=overall_score, reverse=True
        )
        if len(in_class) >= 1:
            red.lineup[wc] = in_class[0]
        if len(in_class) >= 2:
            green.lineup[wc] = in_class[1]
    return red, green


def simulate_intra_squad_dual(
    roster: list[WrestlerProfile], rng: random.Random
) -> Optional[DualResult]:
    if not roster:
        logger.warning("No wrestlers on the roster")
        return None
    red, green = build_intra_squad_teams(roster)
    return simulate_dual(red, green, rng)
