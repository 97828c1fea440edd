# src/atom_sims/core/movement.py

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable
import numpy as np
if TYPE_CHECKING:
    from .atoms import Atom

DEFAULT_SPEED = 2.0

_DIAG = 1.0 / np.sqrt(2.0)


class Direction(str, Enum):
    N = "N"
    E = "E"
    S = "S"
    W = "W"
    NE = "NE"
    SE = "SE"
    SW = "SW"
    NW = "NW"

    @classmethod
    def parse(cls, name: str) -> "Direction":
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown direction '{name}'") from None

    @property
    def unit_vector(self) -> np.ndarray:
        return _UNIT_VECTORS[self].copy()

    def opposite(self) -> "Direction":
        return _COMPASS[(_COMPASS.index(self) + 4) % 8]

    def clockwise(self) -> "Direction":
        return _COMPASS[(_COMPASS.index(self) + 1) % 8]

    def anticlockwise(self) -> "Direction":
        return _COMPASS[(_COMPASS.index(self) - 1) % 8]


# compass order, 45 degrees apart
_COMPASS = (
    Direction.N, Direction.NE, Direction.E, Direction.SE,
    Direction.S, Direction.SW, Direction.W, Direction.NW,
)

# y points up (N is +y)
_UNIT_VECTORS = {
    Direction.N: np.array([0.0, 1.0]),
    Direction.E: np.array([1.0, 0.0]),
    Direction.S: np.array([0.0, -1.0]),
    Direction.W: np.array([-1.0, 0.0]),
    Direction.NE: np.array([_DIAG, _DIAG]),
    Direction.SE: np.array([_DIAG, -_DIAG]),
    Direction.SW: np.array([-_DIAG, -_DIAG]),
    Direction.NW: np.array([-_DIAG, _DIAG]),
}


@dataclass(frozen=True)
class Movement:
    direction: Direction
    speed: float = DEFAULT_SPEED

    def velocity(self) -> np.ndarray:
        return self.direction.unit_vector * self.speed

    def reversed(self) -> "Movement":
        return replace(self, direction=self.direction.opposite())

    def turned(self, direction: Direction) -> "Movement":
        return replace(self, direction=direction)


def integrate_movement(atoms: Iterable[Atom], dt: float) -> None:
    """
    Advance every moving atom by velocity * dt. Stationary atoms are left alone.
    """
    for a in atoms:
        if a.movement is None:
            continue
        a.pos += a.movement.velocity() * dt
