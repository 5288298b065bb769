"""Tests for dual meet scoring and post-meet attrition."""

from conftest import FixedRandom, make_profile
from models.models import DualOutcome, InjuryKind, WeightClass, WinMethod, WinnerSide
from simulation.dual_meet import apply_post_meet_attrition, simulate_dual
from simulation.entities import Injury, MatchResult, Team

W = WeightClass


def _team(name, classes, skill=60):
    return Team.from_wrestlers(name, [make_profile(wc, skill) for wc in classes])


def test_forfeits_and_contested_bouts():
    a = _team("Riverside", [W.W125, W.W133, W.W141])
    b = _team("Lincoln", [W.W125, W.W141, W.W149])
    result = simulate_dual(a, b, FixedRandom(seed=3))

    by_class = {bout.weight_class: bout for bout in result.bouts}
    assert set(by_class) == {W.W125, W.W133, W.W141, W.W149}

    assert by_class[W.W133].method is WinMethod.FORFEIT
    assert by_class[W.W133].winner_side is WinnerSide.A
    assert (by_class[W.W133].points_a, by_class[W.W133].points_b) == (6, 0)

    assert by_class[W.W149].method is WinMethod.FORFEIT
    assert by_class[W.W149].winner_side is WinnerSide.B
    assert (by_class[W.W149].points_a, by_class[W.W149].points_b) == (0, 6)

    assert by_class[W.W125].method is not WinMethod.FORFEIT
    assert by_class[W.W141].method is not WinMethod.FORFEIT


def test_team_score_is_sum_of_bout_points():
    a = _team("Riverside", WeightClass.ladder(), skill=65)
    b = _team("Lincoln", WeightClass.ladder(), skill=55)
    result = simulate_dual(a, b, FixedRandom(seed=9))
    assert result.score_a == sum(bout.points_a for bout in result.bouts)
    assert result.score_b == sum(bout.points_b for bout in result.bouts)
    assert len(result.bouts) == len(WeightClass.ladder())


def test_bouts_follow_ladder_order():
    a = _team("Riverside", [W.W285, W.W125, W.W165])
    b = _team("Lincoln", [W.W165, W.W285])
    result = simulate_dual(a, b, FixedRandom(seed=1))
    order = [int(bout.weight_class) for bout in result.bouts]
    assert order == sorted(order)


def test_slot_open_on_both_sides_is_skipped():
    a = _team("Riverside", [W.W125])
    b = _team("Lincoln", [W.W125])
    result = simulate_dual(a, b, FixedRandom(seed=2))
    assert len(result.bouts) == 1
    assert "133: open on both sides, no bout" in result.log
    assert result.log[-1].startswith("Final Team Score: Riverside")


def test_injected_match_simulator():
    a = _team("Riverside", [W.W125, W.W133])
    b = _team("Lincoln", [W.W125, W.W133])

    def always_a_pins(x, y, rng):
        return MatchResult(winner=x, loser=y, winner_side=WinnerSide.A,
                           method=WinMethod.PIN, margin=20, summary=f"{x.name} pins {y.name}")

    result = simulate_dual(a, b, match_simulator=always_a_pins)
    assert (result.score_a, result.score_b) == (12, 0)
    assert result.outcome is DualOutcome.WIN


def test_restricted_weight_classes():
    a = _team("Riverside", WeightClass.ladder())
    b = _team("Lincoln", WeightClass.ladder())
    result = simulate_dual(a, b, FixedRandom(seed=4), weight_classes=[W.W197, W.W285])
    assert [bout.weight_class for bout in result.bouts] == [W.W197, W.W285]


def test_attrition_caps_and_floors():
    tired = make_profile(fatigue=95, health=41, morale=98,
                         injury=Injury(kind=InjuryKind.MINOR, days=1))
    fresh = make_profile(fatigue=20, health=100, morale=70)
    apply_post_meet_attrition([tired, fresh], DualOutcome.WIN)

    assert tired.fatigue == 100
    assert tired.health == 40
    assert tired.injury.days == 0
    assert tired.morale == 99

    assert fresh.fatigue == 32
    assert fresh.health == 97
    assert fresh.morale == 73


def test_attrition_morale_by_outcome():
    loss = make_profile(morale=70)
    tie = make_profile(morale=70)
    apply_post_meet_attrition([loss], DualOutcome.LOSS)
    apply_post_meet_attrition([tie], DualOutcome.TIE)
    assert loss.morale == 68
    assert tie.morale == 70


def test_attrition_counts_down_form():
    w = make_profile(form=1, form_days=1)
    apply_post_meet_attrition([w], DualOutcome.WIN)
    assert w.form == 0
