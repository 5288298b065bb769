"""Business logic for the wrestling simulator Flask API."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from models.database import create_db_engine, create_session_factory, init_schema
from models.models import WeightClass
from simulation.config import MODIFIER_LABELS
from simulation.dual_meet import apply_post_meet_attrition, simulate_dual
from simulation.entities import (
    BoutResult, DualResult, LeagueTeam, LiveDualState, SeasonContext,
    TournamentMatch, WeightBracket, WrestlerProfile,
)
from simulation.league import (
    record_season_result, reset_season, run_postseason, standings, update_league,
)
from simulation.lineup import (
    auto_fill_lineup, build_team_from_roster, generate_opponent_team, validate_lineup,
    simulate_intra_squad_dual,
)
from simulation.live_dual import LiveDualError, LiveDualStateMachine, LiveDualSummary
from simulation.match_engine import overall_score
from simulation.persistence import load_league, load_roster, record_dual, save_league, save_roster
from simulation.seed import SCHOOL_NAMES, generate_roster
from simulation.tournament import simulate_tournament_bracket

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DB
# ---------------------------------------------------------------------------

def init_db(db_url: str) -> sessionmaker:
    engine = create_db_engine(db_url)
    init_schema(engine)
    return create_session_factory(engine)


def restore_context(ctx: SeasonContext, session_factory: sessionmaker) -> list[str]:
    """Pull any stored roster and standings into ``ctx``; returns load errors."""
    with session_factory() as session:
        loaded = load_roster(session)
        league = load_league(session)
    if loaded.profiles:
        ctx.roster = loaded.profiles
        auto_fill_lineup(ctx)
    if league:
        ctx.league = league
        mine = league.get(ctx.program_name)
        if mine is not None:
            ctx.program_prestige = mine.prestige
    return loaded.errors


def _persist(ctx: SeasonContext, session_factory: sessionmaker,
             dual: Optional[DualResult] = None) -> None:
    with session_factory() as session:
        save_roster(session, ctx.roster)
        save_league(session, ctx.league)
        if dual is not None:
            record_dual(session, dual)
        session.commit()


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def wrestler_dict(w: Optional[WrestlerProfile]) -> Optional[dict]:
    if w is None:
        return None
    return {
        "id": w.id,
        "name": w.name,
        "weight_class": int(w.weight_class),
        "neutral": w.neutral,
        "top": w.top,
        "bottom": w.bottom,
        "strength": w.strength,
        "conditioning": w.conditioning,
        "technique": w.technique,
        "overall": round(overall_score(w), 1),
        "morale": round(w.morale, 1),
        "health": round(w.health, 1),
        "fatigue": round(w.fatigue, 1),
        "injury": {"kind": w.injury.kind.value, "days": w.injury.days} if w.injury else None,
        "form": w.form,
        "potential": w.potential,
        "class_year": w.class_year,
    }


def bout_dict(b: BoutResult) -> dict:
    return {
        "weight_class": int(b.weight_class),
        "a": wrestler_dict(b.a),
        "b": wrestler_dict(b.b),
        "winner_side": b.winner_side.value,
        "method": b.method.value,
        "summary": b.summary,
        "points_a": b.points_a,
        "points_b": b.points_b,
    }


def dual_dict(d: DualResult) -> dict:
    return {
        "team_a": d.team_a,
        "team_b": d.team_b,
        "score_a": d.score_a,
        "score_b": d.score_b,
        "bouts": [bout_dict(b) for b in d.bouts],
        "log": d.text,
    }


def _match_dict(m: TournamentMatch) -> dict:
    return {
        "round": m.round,
        "a": m.a.name,
        "b": m.b.name,
        "winner": m.result.winner.name,
        "method": m.result.method.value,
        "summary": m.result.summary,
    }


def bracket_dict(wb: WeightBracket) -> dict:
    return {
        "weight_class": int(wb.weight_class),
        "quarterfinals": [_match_dict(m) for m in wb.quarterfinals],
        "semifinals": [_match_dict(m) for m in wb.semifinals],
        "final": _match_dict(wb.final) if wb.final else None,
        "champion": wb.champion,
    }


def league_team_dict(t: LeagueTeam, rank: Optional[int] = None) -> dict:
    return {
        "rank": rank,
        "name": t.name,
        "wins": t.wins,
        "ties": t.ties,
        "losses": t.losses,
        "record": t.record,
        "points_for": t.points_for,
        "points_against": t.points_against,
        "win_pct": round(t.win_pct, 3),
        "rating": round(t.rating, 1),
        "prestige": round(t.prestige, 1),
        "last_result": t.last_result,
    }


def live_state_dict(state: Optional[LiveDualState]) -> dict:
    if state is None:
        return {"status": "Idle"}
    return {
        "status": state.status.value,
        "my_team": state.my_team.name,
        "opponent": state.opponent.name,
        "cursor": state.cursor,
        "score_a": state.score_a,
        "score_b": state.score_b,
        "strategy": state.strategy.value,
        "modifiers": [{"type": m.type.value, "remaining": m.remaining} for m in state.modifiers],
        "bouts": [
            {
                "weight_class": int(slot.weight_class),
                "a": wrestler_dict(slot.a),
                "b": wrestler_dict(slot.b),
                "result": bout_dict(slot.result) if slot.result else None,
            }
            for slot in state.bouts
        ],
    }


def _summary_dict(s: LiveDualSummary) -> dict:
    return {
        "status": "Idle",
        "outcome": s.outcome.value,
        "summary": s.summary,
        "result": dual_dict(s.result),
        "stories": [{"headline": st.headline, "blurb": st.blurb, "type": st.type} for st in s.stories],
    }


# ---------------------------------------------------------------------------
# Roster / lineup
# ---------------------------------------------------------------------------

def get_roster(ctx: SeasonContext) -> list[dict]:
    ordered = sorted(ctx.roster, key=lambda w: (int(w.weight_class), w.name))
    return [wrestler_dict(w) for w in ordered]


def regenerate_roster(ctx: SeasonContext, session_factory: sessionmaker) -> list[dict]:
    ctx.roster = generate_roster(ctx.rng, ctx.program_prestige)
    logger.info("Generated a new roster of %d wrestlers", len(ctx.roster))
    ctx.lineup.clear()
    auto_fill_lineup(ctx)
    _persist(ctx, session_factory)
    return get_roster(ctx)


def get_lineup(ctx: SeasonContext) -> dict:
    report = validate_lineup(ctx)
    return {
        "ok": report.ok,
        "message": report.message,
        "missing": [int(wc) for wc in report.missing],
        "selections": {
            str(int(wc)): wid for wc, wid in report.selections.items()
        },
    }


def auto_fill(ctx: SeasonContext) -> dict:
    changed = auto_fill_lineup(ctx)
    result = get_lineup(ctx)
    result["filled"] = [int(wc) for wc in changed]
    return result


# ---------------------------------------------------------------------------
# Duals
# ---------------------------------------------------------------------------

def _opponent(ctx: SeasonContext, opponent_name: Optional[str]):
    mine = build_team_from_roster(ctx)
    name = opponent_name or ctx.rng.choice(
        [n for n in SCHOOL_NAMES if n != ctx.program_name] or SCHOOL_NAMES
    )
    return mine, generate_opponent_team(mine, ctx.rng, name)


def simulate_dual_vs_opponent(
    ctx: SeasonContext, session_factory: sessionmaker, opponent_name: Optional[str] = None
) -> dict:
    if not ctx.roster:
        return {"error": "Add wrestlers first."}
    report = validate_lineup(ctx)
    if not report.ok:
        return {"error": report.message, "missing": [int(wc) for wc in report.missing]}

    mine, rival = _opponent(ctx, opponent_name)
    result = simulate_dual(mine, rival, ctx.rng)
    outcome = result.outcome
    apply_post_meet_attrition(ctx.roster, outcome)
    update_league(ctx, mine.name, rival.name, result.score_a, result.score_b)
    record_season_result(
        ctx, outcome, f"{mine.name} {result.score_a}-{result.score_b} {rival.name}"
    )
    _persist(ctx, session_factory, result)

    payload = dual_dict(result)
    payload["outcome"] = outcome.value
    return payload


def intra_squad(ctx: SeasonContext) -> dict:
    result = simulate_intra_squad_dual(ctx.roster, ctx.rng)
    if result is None:
        return {"error": "No wrestlers on the roster."}
    return dual_dict(result)


# ---------------------------------------------------------------------------
# Tournament
# ---------------------------------------------------------------------------

def run_tournament(ctx: SeasonContext) -> dict:
    bracket = simulate_tournament_bracket(ctx.roster, ctx.rng)
    if bracket is None:
        return {"error": "Generate a roster first to build brackets."}
    return {
        "weights": [bracket_dict(wb) for wb in bracket.weights],
        "placings": [
            {"weight_class": int(p.weight_class), "champion": p.champion, "runner_up": p.runner_up}
            for p in bracket.placings
        ],
    }


# ---------------------------------------------------------------------------
# League
# ---------------------------------------------------------------------------

def get_standings(ctx: SeasonContext) -> list[dict]:
    return [league_team_dict(t, rank) for rank, t in enumerate(standings(ctx), 1)]


def get_season(ctx: SeasonContext) -> dict:
    return {
        "program": ctx.program_name,
        "prestige": round(ctx.program_prestige, 1),
        "wins": ctx.season_wins,
        "losses": ctx.season_losses,
        "ties": ctx.season_ties,
        "postseason_played": ctx.postseason is not None,
        "champion": ctx.postseason.champion if ctx.postseason else None,
        "summaries": list(ctx.summaries),
    }


def start_postseason(ctx: SeasonContext, session_factory: sessionmaker) -> dict:
    if ctx.postseason is not None:
        return {"error": "Postseason already played this season."}
    result = run_postseason(ctx)
    if result is None:
        return {"error": "Not enough teams for postseason."}
    _persist(ctx, session_factory)
    return {
        "seeds": result.seeds,
        "semifinal1": dual_dict(result.semifinal1),
        "semifinal2": dual_dict(result.semifinal2),
        "final": dual_dict(result.final),
        "champion": result.champion,
        "log": result.log,
        "prestige": round(ctx.program_prestige, 1),
    }


def rollover_season(ctx: SeasonContext, session_factory: sessionmaker) -> list[dict]:
    reset_season(ctx)
    _persist(ctx, session_factory)
    return get_standings(ctx)


# ---------------------------------------------------------------------------
# Live dual
# ---------------------------------------------------------------------------

def get_live(machine: LiveDualStateMachine) -> dict:
    return live_state_dict(machine.state)


def start_live(
    ctx: SeasonContext, machine: LiveDualStateMachine,
    opponent_name: Optional[str] = None, strategy: str = "balanced",
) -> dict:
    if not ctx.roster:
        return {"error": "Add wrestlers first."}
    report = validate_lineup(ctx)
    if not report.ok:
        return {"error": report.message, "missing": [int(wc) for wc in report.missing]}
    _, rival = _opponent(ctx, opponent_name)
    try:
        state = machine.start(rival, strategy=strategy)
    except (LiveDualError, ValueError) as e:
        return {"error": str(e)}
    return live_state_dict(state)


def advance_live(
    machine: LiveDualStateMachine, session_factory: sessionmaker
) -> dict:
    try:
        machine.advance_bout()
    except LiveDualError as e:
        return {"error": str(e)}
    if machine.state is None and machine.last_summary is not None:
        _persist(machine.ctx, session_factory, machine.last_summary.result)
        return _summary_dict(machine.last_summary)
    return live_state_dict(machine.state)


def quick_finish_live(
    machine: LiveDualStateMachine, session_factory: sessionmaker
) -> dict:
    try:
        summary = machine.quick_finish()
    except LiveDualError as e:
        return {"error": str(e)}
    _persist(machine.ctx, session_factory, summary.result)
    return _summary_dict(summary)


def apply_live_modifier(machine: LiveDualStateMachine, modifier: str) -> dict:
    try:
        mod = machine.apply_modifier(modifier)
    except (LiveDualError, ValueError) as e:
        return {"error": str(e)}
    payload = live_state_dict(machine.state)
    payload["message"] = MODIFIER_LABELS[mod.type]
    return payload


def set_live_strategy(machine: LiveDualStateMachine, strategy: str) -> dict:
    try:
        machine.set_strategy(strategy)
    except (LiveDualError, ValueError) as e:
        return {"error": str(e)}
    return live_state_dict(machine.state)


def weight_classes() -> list[int]:
    return [int(wc) for wc in WeightClass.ladder()]
