# src/atom_sims/core/collision.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List
import numpy as np

from .atoms import Atom, Cell

COLLISION_EPSILON = 0.05


@dataclass
class CollisionGroup:
    """Atoms found at the same grid intersection during one tick."""
    cell: Cell
    members: List[Atom] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def position(self) -> np.ndarray:
        """Arithmetic mean of member positions (the midpoint for a pair)."""
        if not self.members:
            return np.array(self.cell, dtype=float)
        return np.mean([m.pos for m in self.members], axis=0)

    @property
    def atom_ids(self) -> List[int]:
        return [m.id for m in self.members]


def detect_collisions(atoms: Iterable[Atom], epsilon: float = COLLISION_EPSILON) -> List[CollisionGroup]:
    """
    Bucket atoms by the grid intersection they currently sit on.

    An atom is filed under a cell when both components of its offset from the
    nearest intersection are <= epsilon. Immune atoms are skipped. Buckets that
    received a moving atom also pick up stationary atoms whose rounded cell is
    the same, even if they drifted past epsilon. Every bucket with two or more
    members becomes a group; an atom lands in at most one group.
    """
    buckets: Dict[Cell, List[Atom]] = {}
    has_mover: Dict[Cell, bool] = {}
    stationary_by_cell: Dict[Cell, List[Atom]] = {}
    filed: set[int] = set()

    for a in atoms:
        if a.is_immune:
            continue
        nearest = np.round(a.pos)
        cell = (int(nearest[0]), int(nearest[1]))
        if not a.is_moving:
            stationary_by_cell.setdefault(cell, []).append(a)
        offset = np.abs(a.pos - nearest)
        if offset[0] > epsilon or offset[1] > epsilon:
            continue
        buckets.setdefault(cell, []).append(a)
        filed.add(id(a))
        if a.is_moving:
            has_mover[cell] = True

    for cell, members in buckets.items():
        if not has_mover.get(cell):
            continue
        for s in stationary_by_cell.get(cell, ()):
            if id(s) not in filed:
                members.append(s)
                filed.add(id(s))

    return [CollisionGroup(cell=cell, members=members) for cell, members in buckets.items() if len(members) >= 2]
