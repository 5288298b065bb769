"""Shared pytest fixtures for the wrestling simulator tests."""

import itertools
import random

import pytest

from models.database import create_db_engine, create_session_factory, init_schema
from models.models import WeightClass
from simulation.entities import SeasonContext, WrestlerProfile

_ids = itertools.count(1)


class FixedRandom(random.Random):
    """Replays ``draws`` from ``random()``, then falls back to the seeded stream.

    ``getrandbits`` is overridden so ``randint``/``choice`` keep using bits and
    never consume the replayed draws.
    """

    def __init__(self, draws=(), seed=0):
        super().__init__(seed)
        self.draws = list(draws)

    def random(self):
        if self.draws:
            return self.draws.pop(0)
        return super().random()

    def getrandbits(self, k):
        return super().getrandbits(k)


def make_profile(
    weight_class=WeightClass.W125,
    skill=60,
    name=None,
    **overrides,
) -> WrestlerProfile:
    n = next(_ids)
    fields = dict(
        id=f"w-{n}",
        name=name or f"Wrestler {n}",
        weight_class=weight_class,
        neutral=skill,
        top=skill,
        bottom=skill,
        strength=skill,
        conditioning=skill,
        technique=skill,
        morale=70.0,
        health=100.0,
        fatigue=20.0,
    )
    fields.update(overrides)
    return WrestlerProfile(**fields)


def make_roster(weight_classes=None, skill=60) -> list[WrestlerProfile]:
    return [make_profile(wc, skill) for wc in (weight_classes or WeightClass.ladder())]


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def ctx():
    return SeasonContext(program_name="Riverside", roster=make_roster(), rng=random.Random(7))


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    init_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def app():
    from api.app import create_app
    application = create_app("sqlite://", seed=11)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()
