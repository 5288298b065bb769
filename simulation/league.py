"""League standings, Elo ratings and the four-team postseason."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from models.models import DualOutcome
from simulation.config import (
    ATTR_MAX, ATTR_MIN, CHAMPION_PRESTIGE_BONUS, DEFAULT_PRESTIGE, DEFAULT_RATING,
    ELO_K, LOSING_SEASON_PCT, LOSING_SEASON_PENALTY, POSTSEASON_FIELD,
    PRESTIGE_RATING_SCALE, WINNING_SEASON_BONUS, WINNING_SEASON_PCT,
)
from simulation.dual_meet import simulate_dual
from simulation.entities import LeagueTeam, PostseasonResult, SeasonContext, Team
from simulation.lineup import build_team_from_roster, generate_opponent_team
from simulation.seed import generate_roster

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Standings
# ---------------------------------------------------------------------------

def get_or_create_team(ctx: SeasonContext, name: str) -> LeagueTeam:
    entry = ctx.league.get(name)
    if entry is None:
        entry = LeagueTeam(name=name, rating=DEFAULT_RATING, prestige=DEFAULT_PRESTIGE)
        ctx.league[name] = entry
    return entry


def expected_score(rating: float, opponent_rating: float) -> float:
    return 1 / (1 + 10 ** ((opponent_rating - rating) / 400))


def update_league(
    ctx: SeasonContext, name_a: str, name_b: str, score_a: int, score_b: int
) -> tuple[LeagueTeam, LeagueTeam]:
    """Record one dual: records, points, last result and Elo ratings."""
    a = get_or_create_team(ctx, name_a)
    b = get_or_create_team(ctx, name_b)

    a.points_for += score_a
    a.points_against += score_b
    b.points_for += score_b
    b.points_against += score_a

    if score_a > score_b:
        a.wins += 1
        b.losses += 1
        a.last_result, b.last_result = "W", "L"
        actual_a = 1.0
    elif score_b > score_a:
        b.wins += 1
        a.losses += 1
        a.last_result, b.last_result = "L", "W"
        actual_a = 0.0
    else:
        a.ties += 1
        b.ties += 1
        a.last_result = b.last_result = "T"
        actual_a = 0.5

    expected_a = expected_score(a.rating, b.rating)
    delta = ELO_K * (actual_a - expected_a)
    a.rating += delta
    b.rating -= delta

    logger.info(
        "League: %s %d-%d %s (ratings %.1f / %.1f)",
        name_a, score_a, score_b, name_b, a.rating, b.rating,
    )
    return a, b


def record_season_result(ctx: SeasonContext, outcome: DualOutcome, summary: str) -> None:
    """Count one of the program's own duals toward its season record."""
    if outcome is DualOutcome.WIN:
        ctx.season_wins += 1
    elif outcome is DualOutcome.LOSS:
        ctx.season_losses += 1
    else:
        ctx.season_ties += 1
    ctx.summaries.append(summary)


def sort_league_teams(teams: Iterable[LeagueTeam]) -> list[LeagueTeam]:
    """Win % desc, then point differential desc, then rating desc."""
    return sorted(teams, key=lambda t: (-t.win_pct, -t.point_diff, -t.rating))


def standings(ctx: SeasonContext) -> list[LeagueTeam]:
    return sort_league_teams(ctx.league.values())


# ---------------------------------------------------------------------------
# Postseason
# ---------------------------------------------------------------------------

def _representative_team(ctx: SeasonContext, entry: LeagueTeam) -> Team:
    base = build_team_from_roster(ctx, entry.name)
    if not base.lineup:
        base = Team.from_wrestlers(entry.name, generate_roster(ctx.rng, entry.prestige))
    return generate_opponent_team(base, ctx.rng, entry.name)


def apply_prestige_adjustment(ctx: SeasonContext, champion: Optional[str]) -> float:
    """Adjust the acting program's prestige once for the finished season."""
    mine = ctx.league.get(ctx.program_name)
    if mine is None:
        return ctx.program_prestige

    if champion == mine.name:
        delta = CHAMPION_PRESTIGE_BONUS
    elif mine.win_pct >= WINNING_SEASON_PCT:
        delta = WINNING_SEASON_BONUS
    elif mine.win_pct < LOSING_SEASON_PCT:
        delta = LOSING_SEASON_PENALTY
    else:
        delta = 0

    prestige = max(ATTR_MIN, min(ATTR_MAX, ctx.program_prestige + delta))
    ctx.program_prestige = prestige
    mine.prestige = prestige
    return prestige


def run_postseason(ctx: SeasonContext) -> Optional[PostseasonResult]:
    """Top four by standings: 1v4 and 2v3 semifinals, then a final.

    Runs once per season; returns None if already played or short of teams.
    """
    if ctx.postseason is not None:
        logger.warning("Postseason already played this season")
        return None
    seeds = standings(ctx)[:POSTSEASON_FIELD]
    if len(seeds) < POSTSEASON_FIELD:
        logger.warning("Not enough teams for postseason (%d)", len(seeds))
        return None

    teams = [_representative_team(ctx, entry) for entry in seeds]
    semi1 = simulate_dual(teams[0], teams[3], ctx.rng)
    semi2 = simulate_dual(teams[1], teams[2], ctx.rng)

    by_name = {t.name: t for t in teams}
    finalist_a = by_name[semi1.winner_name]
    finalist_b = by_name[semi2.winner_name]
    final = simulate_dual(finalist_a, finalist_b, ctx.rng)

    result = PostseasonResult(
        seeds=[entry.name for entry in seeds],
        semifinal1=semi1,
        semifinal2=semi2,
        final=final,
        champion=final.winner_name,
    )
    ctx.postseason = result
    apply_prestige_adjustment(ctx, result.champion)
    logger.info("Postseason champion: %s", result.champion)
    return result


def reset_season(ctx: SeasonContext) -> None:
    """Season rollover: clear records, re-rate every team from prestige."""
    for entry in ctx.league.values():
        entry.wins = entry.ties = entry.losses = 0
        entry.points_for = entry.points_against = 0
        entry.last_result = None
        entry.rating = entry.prestige * PRESTIGE_RATING_SCALE
    ctx.postseason = None
    ctx.season_wins = ctx.season_losses = ctx.season_ties = 0
    ctx.summaries.clear()
    logger.info("Season rolled over for %d league teams", len(ctx.league))
