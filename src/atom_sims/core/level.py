# src/atom_sims/core/level.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple
import logging

from . import goals
from .atoms import AtomType, Cell
from .errors import InvalidLevelReference, NoFurtherLevel, NoLevelLoaded
from .goals import CreateAtom, Goal, GoalTarget, NoGoal, ReachPositions
from .movement import DEFAULT_SPEED, Direction, Movement
from atom_sims.utils.reflection import get_class

logger = logging.getLogger(__name__)

_GOAL_KINDS = (NoGoal, ReachPositions, CreateAtom)


@dataclass(frozen=True)
class LevelAtom:
    atom_type: AtomType
    position: Cell
    movement: Movement | None = None

    def __post_init__(self):
        if self.atom_type is AtomType.WALL and self.movement is not None:
            raise ValueError(f"Wall at {self.position} cannot be given a velocity")


@dataclass(frozen=True)
class Level:
    """
    A fully decoded level: what the sidebar shows, what starts on the grid,
    what wins it and which atom types the tray offers.
    """
    description: str
    atoms: Tuple[LevelAtom, ...] = field(default_factory=tuple)
    goal: Goal = field(default_factory=NoGoal)
    placeable_atoms: Tuple[AtomType, ...] = field(default_factory=tuple)
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Level":
        """
        Build a Level from an already-parsed mapping, e.g.

            description: Fuse two atoms
            atoms:
              - {type: Basic, position: [2, 0]}
              - {type: Basic, position: [-2, 0], direction: E, speed: 2.0}
            goal: {type: CreateAtom, atom: Splitting}
            placeable: [Basic, Wall]
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Level must be a mapping, got {type(data).__name__}")
        atoms = tuple(_level_atom_from_dict(a) for a in data.get("atoms") or [])
        return cls(
            description=str(data.get("description", "")),
            atoms=atoms,
            goal=_goal_from_dict(data.get("goal")),
            placeable_atoms=tuple(AtomType.parse(t) for t in data.get("placeable") or []),
            name=str(data.get("name", "")),
        )


def _cell(value: Sequence[Any]) -> Cell:
    if len(value) != 2:
        raise ValueError(f"Grid position must have two coordinates, got {value!r}")
    return int(value[0]), int(value[1])


def _level_atom_from_dict(data: Mapping[str, Any]) -> LevelAtom:
    movement = None
    if data.get("direction") is not None:
        movement = Movement(
            direction=Direction.parse(data["direction"]),
            speed=float(data.get("speed", DEFAULT_SPEED)),
        )
    return LevelAtom(
        atom_type=AtomType.parse(data["type"]),
        position=_cell(data["position"]),
        movement=movement,
    )


def _goal_from_dict(data: Mapping[str, Any] | None) -> Goal:
    if data is None:
        return NoGoal()
    name = data.get("type", "NoGoal")
    # level files spell the empty goal "None"
    if name is None or str(name).strip().lower() == "none":
        return NoGoal()
    kind = get_class(name, goals)
    if kind not in _GOAL_KINDS:
        raise ValueError(f"'{data.get('type')}' is not a goal kind")
    if kind is ReachPositions:
        targets = tuple(
            GoalTarget(atom_type=AtomType.parse(t["type"]), position=_cell(t["position"]))
            for t in data.get("targets") or []
        )
        return ReachPositions(targets=targets)
    if kind is CreateAtom:
        return CreateAtom(atom_type=AtomType.parse(data["atom"]))
    return NoGoal()


def sandbox_level() -> Level:
    """Free play: no goal, every atom type can be placed."""
    return Level(
        description="Sandbox. Place anything, nothing to win.",
        goal=NoGoal(),
        placeable_atoms=tuple(AtomType),
        name="Sandbox",
    )


class LevelPack:
    """
    Ordered levels plus the handle of the one being played.

    An entry may be None while its data is still loading; asking for it then
    raises InvalidLevelReference.
    """

    def __init__(self, levels: Sequence[Optional[Level]] = (), index: int | None = None):
        self.levels: List[Optional[Level]] = list(levels)
        self.index: int | None = index

    def __len__(self) -> int:
        return len(self.levels)

    @property
    def is_loaded(self) -> bool:
        try:
            self.current()
        except (NoLevelLoaded, InvalidLevelReference):
            return False
        return True

    def current(self) -> Level:
        if self.index is None:
            raise NoLevelLoaded("Attempted to load level, but no level was loaded!")
        if not 0 <= self.index < len(self.levels) or self.levels[self.index] is None:
            raise InvalidLevelReference(f"Level {self.index} is not loaded")
        return self.levels[self.index]

    def select(self, index: int) -> Level:
        if not 0 <= index < len(self.levels):
            raise InvalidLevelReference(f"Level {index} does not exist ({len(self.levels)} levels)")
        level = self.levels[index]
        if level is None:
            raise InvalidLevelReference(f"Level {index} is not loaded")
        self.index = index
        logger.info("Selected level %d: %s", index, level.name or level.description)
        return level

    def next(self) -> Level:
        new_index = 0 if self.index is None else self.index + 1
        if new_index >= len(self.levels):
            raise NoFurtherLevel("No more levels")
        return self.select(new_index)
