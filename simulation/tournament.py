"""Eight-man single-elimination brackets, one per weight class."""

from __future__ import annotations

import logging
import random
from typing import Optional

from models.models import WeightClass
from simulation.config import BRACKET_SIZE, TOURNAMENT_PRESTIGE
from simulation.entities import (
    Placing, TournamentBracket, TournamentMatch, WeightBracket, WrestlerProfile,
)
from simulation.match_engine import simulate_match
from simulation.seed import generate_tournament_opponent

logger = logging.getLogger(__name__)

# Seed indices (0-based) for the quarterfinals: 1v8, 4v5, 3v6, 2v7
QUARTERFINAL_PAIRS = ((0, 7), (3, 4), (2, 5), (1, 6))


def _play(
    a: WrestlerProfile, b: WrestlerProfile, round_name: str, rng: random.Random
) -> TournamentMatch:
    # Copies only: bracket form swings must not leak into the caller's roster
    result = simulate_match(a.clone(), b.clone(), rng)
    winner = a if result.winner.id == a.id else b
    loser = b if winner is a else a
    result.winner, result.loser = winner, loser
    return TournamentMatch(round=round_name, a=a, b=b, result=result)


def _winner(match: TournamentMatch) -> WrestlerProfile:
    return match.result.winner


def simulate_weight_bracket(
    pool: list[WrestlerProfile],
    weight_class: WeightClass,
    rng: Optional[random.Random] = None,
    prestige: float = TOURNAMENT_PRESTIGE,
) -> Optional[WeightBracket]:
    """Build and resolve one bracket.

    Entrants at ``weight_class`` are seeded in pool order; the field is padded
    with generated at-large wrestlers up to eight. Returns None when the pool
    is empty.
    """
    if not pool:
        return None
    rng = rng or random.Random()

    seeds = [w for w in pool if w.weight_class == weight_class][:BRACKET_SIZE]
    padded = 0
    while len(seeds) < BRACKET_SIZE:
        seeds.append(generate_tournament_opponent(weight_class, rng, prestige))
        padded += 1
    if padded:
        logger.debug("%d lbs bracket padded with %d at-large entrants", int(weight_class), padded)

    bracket = WeightBracket(weight_class=weight_class)
    bracket.quarterfinals = [
        _play(seeds[i], seeds[j], "Quarterfinal", rng) for i, j in QUARTERFINAL_PAIRS
    ]
    qf = bracket.quarterfinals
    bracket.semifinals = [
        _play(_winner(qf[0]), _winner(qf[1]), "Semifinal", rng),
        _play(_winner(qf[2]), _winner(qf[3]), "Semifinal", rng),
    ]
    sf = bracket.semifinals
    bracket.final = _play(_winner(sf[0]), _winner(sf[1]), "Final", rng)
    logger.info("%d lbs champion: %s", int(weight_class), bracket.champion)
    return bracket


def simulate_tournament_bracket(
    pool: list[WrestlerProfile],
    rng: Optional[random.Random] = None,
    prestige: float = TOURNAMENT_PRESTIGE,
) -> Optional[TournamentBracket]:
    """One bracket per ladder class the pool fields; None if there are none."""
    if not pool:
        logger.warning("No tournament field: roster is empty")
        return None
    rng = rng or random.Random()

    tournament = TournamentBracket()
    for wc in WeightClass.ladder():
        if not any(w.weight_class == wc for w in pool):
            continue
        bracket = simulate_weight_bracket(pool, wc, rng, prestige)
        if bracket is None:
            continue
        tournament.weights.append(bracket)
        tournament.placings.append(
            Placing(weight_class=wc, champion=bracket.champion, runner_up=bracket.runner_up)
        )

    if not tournament.weights:
        logger.warning("No weight classes available for brackets")
        return None
    return tournament
