"""Shared pytest fixtures."""

import pytest

from atom_sims.core import (
    AtomType,
    Level,
    LevelAtom,
    LevelPack,
    Movement,
    NoGoal,
    World,
    create_atom,
)

DT = 1 / 60


@pytest.fixture
def dt():
    return DT


@pytest.fixture
def atom():
    """Build a free-standing atom with an id: atom(type, pos, direction=None, speed=2.0, id=...)."""
    counter = iter(range(1000, 10_000))

    def _make(atom_type, pos, direction=None, speed=2.0, id=None, **kwargs):
        movement = Movement(direction, speed) if direction is not None else None
        a = create_atom(atom_type, pos, movement=movement, **kwargs)
        a.id = next(counter) if id is None else id
        return a

    return _make


@pytest.fixture
def level_atom():
    def _make(atom_type, position, direction=None, speed=2.0):
        movement = Movement(direction, speed) if direction is not None else None
        return LevelAtom(atom_type, position, movement)

    return _make


@pytest.fixture
def make_world():
    """World with a single level built from LevelAtoms, laid out and in Placement."""

    def _make(*atoms, goal=None, placeable=tuple(AtomType), extra_levels=()):
        level = Level(
            description="test level",
            atoms=tuple(atoms),
            goal=goal if goal is not None else NoGoal(),
            placeable_atoms=tuple(placeable),
        )
        world = World(levels=LevelPack([level, *extra_levels]))
        assert world.load_level(0)
        world.drain_events()
        return world

    return _make


@pytest.fixture
def run_until(dt):
    """Step a world until predicate(world, events) holds; returns (steps, events of that step)."""

    def _run(world, predicate, max_steps=2000):
        for n in range(1, max_steps + 1):
            events = world.step(dt)
            if predicate(world, events):
                return n, events
        raise AssertionError(f"condition not reached within {max_steps} steps")

    return _run
