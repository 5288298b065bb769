"""Save and load entity-model objects through the ORM."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.models import (
    DualMeetRecord, InjuryKind, LeagueTeamRecord, WeightClass, WrestlerRecord,
)
from simulation.entities import DualResult, Injury, LeagueTeam, WrestlerProfile

logger = logging.getLogger(__name__)

_SKILLS = ("neutral", "top", "bottom", "strength", "conditioning", "technique")


@dataclass
class RosterLoad:
    profiles: list[WrestlerProfile] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Wrestlers
# ---------------------------------------------------------------------------

def _to_record(w: WrestlerProfile, rec: Optional[WrestlerRecord] = None) -> WrestlerRecord:
    rec = rec or WrestlerRecord(id=w.id)
    rec.name = w.name
    rec.weight_class = int(w.weight_class)
    rec.neutral = w.neutral
    rec.top = w.top
    rec.bottom = w.bottom
    rec.strength = w.strength
    rec.conditioning = w.conditioning
    rec.technique = w.technique
    rec.morale = w.morale
    rec.health = w.health
    rec.fatigue = w.fatigue
    rec.injury_kind = w.injury.kind.value if w.injury else None
    rec.injury_days = w.injury.days if w.injury else 0
    rec.form = w.form
    rec.form_days = w.form_days
    rec.potential = w.potential
    rec.class_year = w.class_year
    return rec


def _to_profile(rec: WrestlerRecord) -> WrestlerProfile:
    """Raises ValueError/TypeError on a malformed row."""
    if not rec.name:
        raise ValueError("missing name")
    skills = {}
    for attr in _SKILLS:
        value = getattr(rec, attr)
        if value is None:
            raise ValueError(f"missing {attr}")
        skills[attr] = int(value)
    injury = None
    if rec.injury_kind is not None:
        injury = Injury(kind=InjuryKind(rec.injury_kind), days=int(rec.injury_days or 0))
    return WrestlerProfile(
        id=rec.id,
        name=rec.name,
        weight_class=WeightClass(int(rec.weight_class)),
        morale=float(rec.morale if rec.morale is not None else 70.0),
        health=float(rec.health if rec.health is not None else 100.0),
        fatigue=float(rec.fatigue if rec.fatigue is not None else 20.0),
        injury=injury,
        form=int(rec.form or 0),
        form_days=int(rec.form_days or 0),
        potential=int(rec.potential or 99),
        class_year=rec.class_year,
        **skills,
    )


def save_roster(session: Session, roster: list[WrestlerProfile]) -> None:
    """Replace the stored roster with ``roster``."""
    keep = {w.id for w in roster}
    for rec in session.execute(select(WrestlerRecord)).scalars().all():
        if rec.id not in keep:
            session.delete(rec)
    for w in roster:
        session.merge(_to_record(w, session.get(WrestlerRecord, w.id)))
    session.flush()


def load_roster(session: Session) -> RosterLoad:
    """Stored roster, skipping (and reporting) rows that cannot be read."""
    loaded = RosterLoad()
    try:
        rows = session.execute(select(WrestlerRecord)).scalars().all()
    except SQLAlchemyError as e:
        loaded.errors.append(f"Error loading roster: {e}")
        logger.warning("Roster query failed, continuing with empty roster: %s", e)
        return loaded

    for rec in rows:
        try:
            loaded.profiles.append(_to_profile(rec))
        except (ValueError, TypeError) as e:
            loaded.errors.append(f"Wrestler {rec.id}: {e}")
    if loaded.errors:
        logger.warning("Skipped %d malformed roster records", len(loaded.errors))
    return loaded


# ---------------------------------------------------------------------------
# League
# ---------------------------------------------------------------------------

def save_league(session: Session, league: dict[str, LeagueTeam]) -> None:
    existing = {
        rec.name: rec
        for rec in session.execute(select(LeagueTeamRecord)).scalars().all()
    }
    for name, team in league.items():
        rec = existing.get(name) or LeagueTeamRecord(name=name)
        rec.wins = team.wins
        rec.ties = team.ties
        rec.losses = team.losses
        rec.points_for = team.points_for
        rec.points_against = team.points_against
        rec.rating = team.rating
        rec.prestige = team.prestige
        rec.last_result = team.last_result
        session.add(rec)
    for name, rec in existing.items():
        if name not in league:
            session.delete(rec)
    session.flush()


def load_league(session: Session) -> dict[str, LeagueTeam]:
    rows = session.execute(select(LeagueTeamRecord)).scalars().all()
    return {
        rec.name: LeagueTeam(
            name=rec.name,
            wins=rec.wins or 0,
            ties=rec.ties or 0,
            losses=rec.losses or 0,
            points_for=rec.points_for or 0,
            points_against=rec.points_against or 0,
            rating=rec.rating,
            prestige=rec.prestige,
            last_result=rec.last_result,
        )
        for rec in rows
    }


# ---------------------------------------------------------------------------
# Duals
# ---------------------------------------------------------------------------

def record_dual(session: Session, result: DualResult, meet_date: Optional[date] = None) -> DualMeetRecord:
    bouts = [
        {
            "weight_class": int(b.weight_class),
            "a": b.a.name if b.a else None,
            "b": b.b.name if b.b else None,
            "winner_side": b.winner_side.value,
            "method": b.method.value,
            "summary": b.summary,
            "points_a": b.points_a,
            "points_b": b.points_b,
        }
        for b in result.bouts
    ]
    rec = DualMeetRecord(
        team_a=result.team_a,
        team_b=result.team_b,
        score_a=result.score_a,
        score_b=result.score_b,
        meet_date=meet_date or date.today(),
        bouts=json.dumps(bouts),
        log=result.text,
    )
    session.add(rec)
    session.flush()
    return rec
