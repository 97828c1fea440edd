# src/atom_sims/core/atoms.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Sequence
import numpy as np

from .movement import Movement

Cell = Tuple[int, int]


class AtomType(str, Enum):
    BASIC = "Basic"
    SPLITTING = "Splitting"
    WALL = "Wall"
    REACTIVE = "Reactive"
    ANTIMATTER = "Antimatter"

    @classmethod
    def parse(cls, name: str) -> "AtomType":
        target = name.strip().lower()
        for t in cls:
            if t.value.lower() == target or t.name.lower() == target:
                return t
        raise ValueError(f"Unknown atom type '{name}'")


@dataclass
class ImmunityTimer:
    """Post-spawn countdown; while it runs the atom is invisible to collision detection."""
    remaining: float

    def tick(self, dt: float) -> bool:
        self.remaining -= dt
        return self.remaining <= 0.0


def to_cell(pos: Sequence[float]) -> Cell:
    """Nearest grid intersection of a position."""
    return int(np.round(pos[0])), int(np.round(pos[1]))


@dataclass
class Atom:
    """
    A particle on the grid.

    - pos: grid-space position, float (2,), grid-aligned while at rest
    - movement: None for stationary atoms
    - immunity: running cooldown after being spawned by a reaction
    - placed: True for atoms the player put down (as opposed to level-authored ones)
    """
    id: int | None
    atom_type: AtomType
    pos: np.ndarray           # shape (2,)
    movement: Movement | None = None
    immunity: ImmunityTimer | None = None
    placed: bool = False

    def __post_init__(self):
        if self.atom_type is AtomType.WALL and self.movement is not None:
            raise ValueError("Wall atoms cannot move")

    @property
    def is_moving(self) -> bool:
        return self.movement is not None

    @property
    def is_immune(self) -> bool:
        return self.immunity is not None

    @property
    def cell(self) -> Cell:
        return to_cell(self.pos)


@dataclass
class GoalMarker:
    """Target the player must reach with an atom of the given type."""
    id: int | None
    atom_type: AtomType
    cell: Cell

    @property
    def pos(self) -> np.ndarray:
        return np.array(self.cell, dtype=float)


def create_atom(
    atom_type: AtomType,
    pos: Sequence[float],
    movement: Movement | None = None,
    immunity: float | None = None,
    placed: bool = False,
) -> Atom:
    """Helper to create an Atom with a fresh float position and no id yet."""
    return Atom(
        id=None,
        atom_type=atom_type,
        pos=np.array(pos, dtype=float),
        movement=movement,
        immunity=ImmunityTimer(float(immunity)) if immunity is not None else None,
        placed=placed,
    )
