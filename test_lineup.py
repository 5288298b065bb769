"""Tests for lineup validation, auto-fill and team building."""

import random

from conftest import make_profile, make_roster
from models.models import InjuryKind, WeightClass
from simulation.entities import Injury, SeasonContext
from simulation.lineup import (
    auto_fill_lineup, best_candidate_for_weight, build_intra_squad_teams,
    build_team_from_roster, generate_opponent_team, simulate_intra_squad_dual,
    validate_lineup,
)

W = WeightClass


def _ctx(roster, allow_bump=False):
    return SeasonContext(program_name="Riverside", roster=roster,
                         allow_bump=allow_bump, rng=random.Random(3))


def test_best_candidate_is_highest_overall():
    weak = make_profile(W.W125, skill=50)
    strong = make_profile(W.W125, skill=70)
    other = make_profile(W.W133, skill=90)
    assert best_candidate_for_weight([weak, strong, other], W.W125) is strong
    assert best_candidate_for_weight([weak, strong], W.W125, exclude={strong.id}) is weak
    assert best_candidate_for_weight([other], W.W125) is None


def test_auto_fill_selects_everyone():
    ctx = _ctx(make_roster())
    changed = auto_fill_lineup(ctx)
    assert changed == WeightClass.ladder()
    assert all(ctx.find_wrestler(ctx.lineup[wc]).weight_class is wc for wc in WeightClass.ladder())
    assert auto_fill_lineup(ctx) == []


def test_full_lineup_is_valid():
    ctx = _ctx(make_roster())
    auto_fill_lineup(ctx)
    report = validate_lineup(ctx)
    assert report.ok
    assert report.missing == []
    assert report.message == "Lineup ready."


def test_injured_starter_is_replaced_from_same_class():
    roster = make_roster()
    hurt = roster[0]
    hurt.injury = Injury(kind=InjuryKind.MAJOR, days=5)
    backup = make_profile(W.W125, skill=40)
    ctx = _ctx(roster + [backup])
    ctx.lineup[W.W125] = hurt.id

    report = validate_lineup(ctx)
    assert report.ok
    assert ctx.lineup[W.W125] == backup.id


def test_missing_class_is_reported():
    ctx = _ctx(make_roster([wc for wc in WeightClass.ladder() if wc is not W.W157]))
    report = validate_lineup(ctx)
    assert not report.ok
    assert report.missing == [W.W157]
    assert "157" in report.message


def test_bump_fills_from_lower_class():
    roster = make_roster([wc for wc in WeightClass.ladder() if wc is not W.W157])
    extra = make_profile(W.W149, skill=45)
    ctx = _ctx(roster + [extra], allow_bump=True)
    auto_fill_lineup(ctx)
    report = validate_lineup(ctx)
    assert report.ok
    assert ctx.lineup[W.W157] == extra.id


def test_no_wrestler_starts_twice():
    roster = make_roster()
    ctx = _ctx(roster)
    ctx.lineup[W.W125] = roster[1].id
    ctx.lineup[W.W133] = roster[1].id
    report = validate_lineup(ctx)
    chosen = [wid for wid in report.selections.values() if wid]
    assert len(chosen) == len(set(chosen))


def test_team_from_roster_excludes_major_injury():
    roster = make_roster([W.W125, W.W133])
    roster[1].injury = Injury(kind=InjuryKind.MAJOR, days=2)
    team = build_team_from_roster(_ctx(roster))
    assert team.name == "Riverside"
    assert team.at(W.W125) is roster[0]
    assert team.at(W.W133) is None


def test_opponent_team_mirrors_lineup():
    roster = make_roster([W.W125, W.W184])
    base = build_team_from_roster(_ctx(roster))
    rival = generate_opponent_team(base, random.Random(4), "Lincoln")

    assert rival.name == "Lincoln"
    assert set(rival.lineup) == set(base.lineup)
    for wc, clone in rival.lineup.items():
        original = base.at(wc)
        assert clone.id != original.id
        assert abs(clone.neutral - original.neutral) <= 8
        assert (clone.morale, clone.health, clone.fatigue) == (70, 95, 25)
    assert roster[0].neutral == 60


def test_intra_squad_split():
    top = make_profile(W.W125, skill=70)
    second = make_profile(W.W125, skill=60)
    third = make_profile(W.W125, skill=50)
    lone = make_profile(W.W285, skill=65)
    red, green = build_intra_squad_teams([third, top, lone, second])
    assert red.at(W.W125) is top
    assert green.at(W.W125) is second
    assert red.at(W.W285) is lone
    assert green.at(W.W285) is None


def test_intra_squad_dual():
    assert simulate_intra_squad_dual([], random.Random(1)) is None
    roster = [make_profile(W.W125), make_profile(W.W125), make_profile(W.W133)]
    result = simulate_intra_squad_dual(roster, random.Random(1))
    assert (result.team_a, result.team_b) == ("Red", "Green")
    assert len(result.bouts) == 2
