"""
Live dual: a dual resolved one bout at a time, with the caller able to change
strategy and call coaching modifiers between bouts.

States: Idle -> Active -> Complete -> (finalize) -> Idle. One instance per
season context; calls against one instance must be serialized by the host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from models.models import DualOutcome, LiveStatus, ModifierType, Strategy, WeightClass
from simulation.config import MODIFIER_USES, STRATEGY_MULTIPLIERS
from simulation.dual_meet import apply_post_meet_attrition, contested_bout, forfeit_bout
from simulation.entities import (
    BoutResult, CoachingModifier, DualResult, LiveBoutSlot, LiveDualState,
    SeasonContext, Team,
)
from simulation.league import get_or_create_team, record_season_result, update_league
from simulation.lineup import build_team_from_roster
from simulation.match_engine import effective_profile, pin_margin_for, resolve_bout
from simulation.narrative import DualStory, generate_dual_stories

logger = logging.getLogger(__name__)


class LiveDualError(RuntimeError):
    """Raised when a live-dual call does not fit the current state."""


@dataclass
class LiveDualSummary:
    """What ``finalize`` hands back once the dual is committed."""
    result: DualResult
    outcome: DualOutcome
    summary: str
    stories: list[DualStory] = field(default_factory=list)


class LiveDualStateMachine:
    def __init__(self, ctx: SeasonContext):
        self.ctx = ctx
        self.state: Optional[LiveDualState] = None
        self.last_summary: Optional[LiveDualSummary] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def status(self) -> LiveStatus:
        return self.state.status if self.state else LiveStatus.IDLE

    def _require(self, *allowed: LiveStatus) -> LiveDualState:
        if self.status not in allowed:
            wanted = "/".join(s.value for s in allowed)
            raise LiveDualError(f"Live dual is {self.status.value}, expected {wanted}")
        return self.state

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def start(
        self,
        opponent: Team,
        strategy: Union[Strategy, str] = Strategy.BALANCED,
        is_postseason: bool = False,
        training_note: Optional[str] = None,
        weight_classes: Optional[list[WeightClass]] = None,
    ) -> LiveDualState:
        self._require(LiveStatus.IDLE)
        my_team = build_team_from_roster(self.ctx)
        bouts = [
            LiveBoutSlot(weight_class=wc, a=my_team.at(wc), b=opponent.at(wc))
            for wc in (weight_classes or WeightClass.ladder())
        ]
        self.state = LiveDualState(
            my_team=my_team,
            opponent=opponent,
            bouts=bouts,
            strategy=Strategy(strategy),
            is_postseason=is_postseason,
            training_note=training_note,
        )
        logger.info("Live dual started: %s vs %s", my_team.name, opponent.name)
        return self.state

    def set_strategy(self, strategy: Union[Strategy, str]) -> Strategy:
        state = self._require(LiveStatus.ACTIVE)
        state.strategy = Strategy(strategy)
        return state.strategy

    def apply_modifier(self, modifier: Union[ModifierType, str]) -> CoachingModifier:
        state = self._require(LiveStatus.ACTIVE)
        mod = CoachingModifier(type=ModifierType(modifier), remaining=MODIFIER_USES)
        state.modifiers.append(mod)
        logger.debug("Modifier %s queued for %d uses", mod.type.value, mod.remaining)
        return mod

    # ------------------------------------------------------------------
    # Bout resolution
    # ------------------------------------------------------------------

    def _expire_modifiers(self, state: LiveDualState) -> None:
        for mod in state.modifiers:
            mod.remaining -= 1
        expired = [m for m in state.modifiers if m.remaining <= 0]
        if expired:
            logger.debug("Modifiers expired: %s", [m.type.value for m in expired])
        state.modifiers = [m for m in state.modifiers if m.remaining > 0]

    def _resolve_slot(self, state: LiveDualState, slot: LiveBoutSlot) -> Optional[BoutResult]:
        if slot.a is None and slot.b is None:
            return None
        if slot.a is None or slot.b is None:
            team = state.my_team.name if slot.a is not None else state.opponent.name
            return forfeit_bout(slot.weight_class, slot.a, slot.b, team)

        match = resolve_bout(
            slot.a,
            slot.b,
            self.ctx.rng,
            strategy_modifier=STRATEGY_MULTIPLIERS[state.strategy],
            pin_margin=pin_margin_for(state.modifiers),
            a_effective=effective_profile(slot.a, state.modifiers),
        )
        return contested_bout(slot.weight_class, slot.a, slot.b, match)

    def _step(self, state: LiveDualState) -> Optional[BoutResult]:
        slot = state.current
        self._expire_modifiers(state)
        result = self._resolve_slot(state, slot)
        if result is not None:
            slot.result = result
            state.score_a += result.points_a
            state.score_b += result.points_b
        state.cursor += 1
        if state.done:
            state.status = LiveStatus.COMPLETE
        return result

    def advance_bout(self) -> Optional[BoutResult]:
        """Resolve the bout at the cursor. Finalizes when the last slot is done."""
        state = self._require(LiveStatus.ACTIVE)
        result = self._step(state)
        if state.status is LiveStatus.COMPLETE:
            self.finalize()
        return result

    def quick_finish(self) -> LiveDualSummary:
        """Resolve every remaining bout exactly as ``advance_bout`` would."""
        state = self._require(LiveStatus.ACTIVE)
        while state.status is LiveStatus.ACTIVE:
            self._step(state)
        return self.finalize()

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------

    def finalize(self) -> LiveDualSummary:
        state = self._require(LiveStatus.COMPLETE)
        ctx = self.ctx
        my_name, opp_name = state.my_team.name, state.opponent.name

        result = DualResult(team_a=my_name, team_b=opp_name,
                            score_a=state.score_a, score_b=state.score_b)
        for slot in state.bouts:
            if slot.result is not None:
                result.bouts.append(slot.result)
                result.log.append(f"{int(slot.weight_class)}: {slot.result.summary}")
        result.log.append(f"Final: {my_name} {state.score_a} - {state.score_b} {opp_name}")
        outcome = result.outcome

        apply_post_meet_attrition(ctx.roster, outcome)

        # Ratings before the update drive the upset stories
        my_rating = get_or_create_team(ctx, my_name).rating
        opp_rating = get_or_create_team(ctx, opp_name).rating
        update_league(ctx, my_name, opp_name, state.score_a, state.score_b)

        stories = generate_dual_stories(
            state.my_team, state.opponent, result, outcome,
            my_rating, opp_rating, state.is_postseason,
        )
        summary = f"{my_name} {state.score_a}-{state.score_b} {opp_name}"
        if state.training_note:
            summary += f" | {state.training_note}"
        record_season_result(
            ctx, outcome, summary + (f" | {stories[0].headline}" if stories else "")
        )

        self.last_summary = LiveDualSummary(
            result=result, outcome=outcome, summary=summary, stories=stories
        )
        self.state = None
        logger.info("Live dual final: %s (%s)", summary, outcome.value)
        return self.last_summary
