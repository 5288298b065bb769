"""Tests for the bout engine: scoring, methods, form and coaching modifiers."""

import pytest

from conftest import FixedRandom, make_profile
from models.models import InjuryKind, ModifierType, WinMethod, WinnerSide
from simulation.entities import CoachingModifier, Injury
from simulation.match_engine import (
    composite_score, effective_profile, injury_penalty, method_for_margin,
    pin_margin_for, resolve_bout, simulate_match, team_points_for_method, tick_form,
)


def test_identical_profiles_fixed_draws_decision_for_b():
    a = make_profile(skill=60)
    b = make_profile(skill=60)
    result = simulate_match(a, b, FixedRandom([0.3, 0.7]))
    assert result.winner is b
    assert result.winner_side is WinnerSide.B
    assert result.method is WinMethod.DECISION
    assert result.margin == pytest.approx(4.0)


def test_equal_scores_go_to_side_a():
    a = make_profile(skill=60)
    b = make_profile(skill=60)
    result = resolve_bout(a, b, FixedRandom([0.5, 0.5]))
    assert result.winner_side is WinnerSide.A


@pytest.mark.parametrize("margin,expected", [
    (0.5, WinMethod.DECISION),
    (6.0, WinMethod.DECISION),
    (6.01, WinMethod.MAJOR),
    (10.0, WinMethod.MAJOR),
    (10.5, WinMethod.TECH_FALL),
    (15.0, WinMethod.TECH_FALL),
    (15.01, WinMethod.PIN),
])
def test_method_thresholds(margin, expected):
    assert method_for_margin(margin) is expected


def test_solid_threshold_turns_pin_into_tech_fall():
    assert method_for_margin(16) is WinMethod.PIN
    margin = pin_margin_for([CoachingModifier(type=ModifierType.SOLID)])
    assert margin == 18
    assert method_for_margin(16, margin) is WinMethod.TECH_FALL
    assert method_for_margin(18.5, margin) is WinMethod.PIN


def test_push_does_not_raise_pin_threshold():
    assert pin_margin_for([CoachingModifier(type=ModifierType.PUSH)]) == 15
    assert pin_margin_for([]) == 15


def test_team_points():
    assert team_points_for_method(WinMethod.PIN) == 6
    assert team_points_for_method(WinMethod.FORFEIT) == 6
    assert team_points_for_method(WinMethod.TECH_FALL) == 5
    assert team_points_for_method(WinMethod.MAJOR) == 4
    assert team_points_for_method(WinMethod.DECISION) == 3


def test_bonus_points_never_decrease_with_margin():
    margins = [x / 2 for x in range(0, 50)]
    points = [team_points_for_method(method_for_margin(m)) for m in margins]
    assert points == sorted(points)


def test_composite_score_baseline():
    # 1.0525 * skill - 1.5 for a fresh profile
    w = make_profile(skill=60)
    assert composite_score(w) == pytest.approx(1.0525 * 60 - 1.5)


def test_strategy_multiplier_scales_composite():
    w = make_profile(skill=60)
    assert composite_score(w, 1.05) == pytest.approx(composite_score(w) * 1.05)


def test_injury_penalty_applies_only_while_active():
    w = make_profile(injury=Injury(kind=InjuryKind.MAJOR, days=3))
    assert injury_penalty(w) == 0.6
    w.injury.days = 0
    assert injury_penalty(w) == 1.0


def test_reads_are_clamped():
    w = make_profile(neutral=150, top=-5)
    base = make_profile(neutral=99, top=1)
    assert composite_score(w) == pytest.approx(composite_score(base))


def test_simulate_match_updates_form():
    a = make_profile(skill=60)
    b = make_profile(skill=60)
    simulate_match(a, b, FixedRandom([0.9, 0.1]))
    assert (a.form, b.form) == (1, -1)
    assert a.form_days == b.form_days == 5


def test_form_is_capped():
    a = make_profile(skill=60, form=2)
    b = make_profile(skill=60, form=-2)
    simulate_match(a, b, FixedRandom([0.9, 0.1]))
    assert (a.form, b.form) == (2, -2)


def test_resolve_bout_has_no_side_effects():
    a = make_profile(skill=60)
    b = make_profile(skill=60)
    resolve_bout(a, b, FixedRandom([0.9, 0.1]))
    assert a.form == b.form == 0


def test_tick_form_resets_after_window():
    w = make_profile(form=2, form_days=2)
    tick_form(w)
    assert (w.form, w.form_days) == (2, 1)
    tick_form(w)
    assert (w.form, w.form_days) == (0, 0)


def test_effective_profile_leaves_original_untouched():
    w = make_profile(skill=60)
    mods = [CoachingModifier(type=ModifierType.PUSH), CoachingModifier(type=ModifierType.SOLID)]
    snap = effective_profile(w, mods)
    assert snap.neutral == 62
    assert snap.conditioning == 61
    assert w.neutral == 60
    assert w.conditioning == 60


def test_resolve_bout_scores_from_effective_snapshot():
    a = make_profile(skill=60)
    b = make_profile(skill=60)
    boosted = effective_profile(a, [CoachingModifier(type=ModifierType.PUSH)])
    result = resolve_bout(a, b, FixedRandom([0.5, 0.5]), a_effective=boosted)
    assert result.winner is a
    assert result.margin > 0
