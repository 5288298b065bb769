"""Tests for eight-man brackets and the multi-class tournament."""

import random

from conftest import make_profile, make_roster
from models.models import WeightClass
from simulation.tournament import simulate_tournament_bracket, simulate_weight_bracket

W = WeightClass


def test_bracket_padded_to_eight():
    pool = [make_profile(W.W125) for _ in range(3)]
    bracket = simulate_weight_bracket(pool, W.W125, random.Random(5))

    assert len(bracket.quarterfinals) == 4
    assert len(bracket.semifinals) == 2
    assert bracket.final is not None
    assert len(bracket.matches) == 7

    entrants = [m.a for m in bracket.quarterfinals] + [m.b for m in bracket.quarterfinals]
    assert len(entrants) == 8
    assert len({w.id for w in entrants}) == 8
    for w in pool:
        assert w in entrants
    assert all(w.weight_class is W.W125 for w in entrants)


def test_top_seed_meets_eighth():
    pool = [make_profile(W.W133) for _ in range(8)]
    bracket = simulate_weight_bracket(pool, W.W133, random.Random(1))
    assert bracket.quarterfinals[0].a is pool[0]
    assert bracket.quarterfinals[0].b is pool[7]


def test_winners_advance():
    pool = [make_profile(W.W141) for _ in range(8)]
    bracket = simulate_weight_bracket(pool, W.W141, random.Random(2))
    qf_winners = [m.result.winner for m in bracket.quarterfinals]
    sf_winners = [m.result.winner for m in bracket.semifinals]
    assert bracket.semifinals[0].a is qf_winners[0]
    assert bracket.semifinals[0].b is qf_winners[1]
    assert bracket.semifinals[1].a is qf_winners[2]
    assert bracket.semifinals[1].b is qf_winners[3]
    assert {bracket.final.a.id, bracket.final.b.id} == {w.id for w in sf_winners}
    assert bracket.champion == bracket.final.result.winner.name
    assert bracket.runner_up == bracket.final.result.loser.name


def test_empty_pool_returns_none():
    assert simulate_weight_bracket([], W.W125) is None
    assert simulate_tournament_bracket([]) is None


def test_bracket_does_not_touch_pool_form():
    pool = [make_profile(W.W149) for _ in range(8)]
    simulate_weight_bracket(pool, W.W149, random.Random(3))
    assert all(w.form == 0 and w.form_days == 0 for w in pool)


def test_tournament_only_covers_fielded_classes():
    pool = make_roster([W.W125, W.W197, W.W285])
    result = simulate_tournament_bracket(pool, random.Random(4))
    assert [wb.weight_class for wb in result.weights] == [W.W125, W.W197, W.W285]
    assert [p.weight_class for p in result.placings] == [W.W125, W.W197, W.W285]
    for wb, placing in zip(result.weights, result.placings):
        assert placing.champion == wb.champion
        assert placing.runner_up == wb.runner_up
