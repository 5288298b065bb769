"""Wrestler, roster and league generation for the wrestling program simulator."""

from __future__ import annotations

import logging
import random
import uuid
from typing import Optional

from models.models import WeightClass
from simulation.config import (
    DEFAULT_PRESTIGE, PRESTIGE_RATING_SCALE, TOURNAMENT_CONDITION, TOURNAMENT_PRESTIGE,
)
from simulation.entities import LeagueTeam, SeasonContext, WrestlerProfile, clamp_stat

logger = logging.getLogger(__name__)

_FIRST_NAMES = [
    "Logan", "Carter", "Mason", "Hunter", "Wyatt", "Colton", "Bryce", "Gavin",
    "Tanner", "Blake", "Chase", "Dylan", "Evan", "Garrett", "Jace", "Kyle",
    "Landon", "Micah", "Nolan", "Owen", "Parker", "Reid", "Spencer", "Tate",
    "Austin", "Brody", "Cody", "Drew", "Eli", "Grant", "Jalen", "Kade",
    "Luis", "Marco", "Nico", "Omar", "Rafael", "Sergio", "Tyson", "Victor",
]

_LAST_NAMES = [
    "Anderson", "Baker", "Brooks", "Carlson", "Dawson", "Ellis", "Fischer", "Griffin",
    "Hansen", "Iverson", "Jensen", "Keller", "Larson", "Meyer", "Nelson", "Olsen",
    "Peterson", "Quinn", "Reyes", "Schultz", "Thompson", "Ulrich", "Vance", "Walsh",
    "Brands", "Dake", "Gable", "Sanderson", "Smith", "Cael", "Ruth", "Taylor",
    "Garcia", "Lopez", "Martinez", "Ramirez", "Torres", "Flores", "Diaz", "Morales",
]

SCHOOL_NAMES = [
    "Riverside", "Lincoln", "Central Valley", "North Ridge", "Eastwood",
    "West Plains", "Oak Hollow", "Cedar Falls", "Granite Bay", "Lakeview",
    "Summit", "Pine Creek",
]

CLASS_YEARS = ("FR", "SO", "JR", "SR")

_STAT_VARIANCE = 8
_POTENTIAL_SPREAD = 6


def new_id(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128)))


def random_name(rng: random.Random, used: Optional[set[str]] = None) -> str:
    used = used if used is not None else set()
    for _ in range(200):
        name = f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)}"
        if name not in used:
            used.add(name)
            return name
    name = f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)} Jr."
    used.add(name)
    return name


def prestige_base(prestige: float, athletics: float = 7, popularity: float = 7) -> float:
    """Baseline stat level for a program."""
    return (
        55
        + (prestige - 70) * 0.35
        + (athletics - 5) * 1.2
        + (popularity - 5) * 1.4
    )


def random_stat(base: float, rng: random.Random) -> int:
    return clamp_stat(base + rng.randint(-_STAT_VARIANCE, _STAT_VARIANCE))


def generate_wrestler(
    weight_class: WeightClass,
    rng: random.Random,
    prestige: float = TOURNAMENT_PRESTIGE,
    athletics: float = 7,
    popularity: float = 7,
    used_names: Optional[set[str]] = None,
) -> WrestlerProfile:
    base = prestige_base(prestige, athletics, popularity)
    return WrestlerProfile(
        id=new_id(rng),
        name=random_name(rng, used_names),
        weight_class=weight_class,
        neutral=random_stat(base, rng),
        top=random_stat(base, rng),
        bottom=random_stat(base, rng),
        strength=random_stat(base, rng),
        conditioning=random_stat(base, rng),
        technique=random_stat(base, rng),
        potential=clamp_stat(base + rng.randint(-_POTENTIAL_SPREAD, _POTENTIAL_SPREAD - 1)),
        class_year=rng.choice(CLASS_YEARS),
    )


def generate_tournament_opponent(
    weight_class: WeightClass,
    rng: random.Random,
    prestige: float = TOURNAMENT_PRESTIGE,
) -> WrestlerProfile:
    """At-large entrant used to fill out a bracket."""
    w = generate_wrestler(weight_class, rng, prestige=prestige)
    w.morale = TOURNAMENT_CONDITION["morale"]
    w.health = TOURNAMENT_CONDITION["health"]
    w.fatigue = TOURNAMENT_CONDITION["fatigue"]
    return w


def generate_roster(
    rng: random.Random,
    prestige: float = DEFAULT_PRESTIGE,
    athletics: float = 7,
    popularity: float = 7,
) -> list[WrestlerProfile]:
    """One wrestler per class, with thinner programs leaving some classes open."""
    depth = (athletics + popularity) / 2
    if depth < 5:
        open_chance = 0.3
    elif depth < 7:
        open_chance = 0.15
    else:
        open_chance = 0.05

    used: set[str] = set()
    roster = []
    for wc in WeightClass.ladder():
        if rng.random() < open_chance:
            continue
        w = generate_wrestler(wc, rng, prestige, athletics, popularity, used_names=used)
        w.morale = 70 + rng.randint(0, 9)
        w.health = 90 + rng.randint(0, 9)
        w.fatigue = 20 + rng.randint(0, 9)
        roster.append(w)
    return roster


def program_prestige(index: int) -> float:
    return 70 + (index % 20)


def init_league(ctx: SeasonContext, names: Optional[list[str]] = None) -> None:
    """Fresh standings for every program, rated from prestige."""
    names = names if names is not None else list(SCHOOL_NAMES)
    if ctx.program_name not in names:
        names = [ctx.program_name] + names
    ctx.league = {}
    for idx, name in enumerate(names):
        prestige = ctx.program_prestige if name == ctx.program_name else program_prestige(idx)
        ctx.league[name] = LeagueTeam(
            name=name, rating=prestige * PRESTIGE_RATING_SCALE, prestige=prestige
        )
    ctx.postseason = None


def seed_season(
    program_name: str = "My Team",
    prestige: float = DEFAULT_PRESTIGE,
    seed: Optional[int] = None,
) -> SeasonContext:
    """A ready-to-play season: roster, auto lineup and league table."""
    from simulation.lineup import auto_fill_lineup

    ctx = SeasonContext(
        program_name=program_name,
        program_prestige=prestige,
        rng=random.Random(seed),
    )
    ctx.roster = generate_roster(ctx.rng, prestige)
    auto_fill_lineup(ctx)
    init_league(ctx)
    logger.info("Seeded %s: %d wrestlers, %d league teams",
                program_name, len(ctx.roster), len(ctx.league))
    return ctx
