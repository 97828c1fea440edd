# src/atom_sims/core/goals.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union
import numpy as np

from .atoms import Atom, AtomType, Cell, GoalMarker

GOAL_THRESHOLD = 0.5


@dataclass(frozen=True)
class GoalTarget:
    atom_type: AtomType
    position: Cell


@dataclass(frozen=True)
class NoGoal:
    """Open sandbox; the level never completes on its own."""


@dataclass(frozen=True)
class ReachPositions:
    targets: Tuple[GoalTarget, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CreateAtom:
    atom_type: AtomType


Goal = Union[NoGoal, ReachPositions, CreateAtom]


def goal_markers_for(goal: Goal) -> List[GoalMarker]:
    """Markers to place on the grid when the level starts (ReachPositions only)."""
    if not isinstance(goal, ReachPositions):
        return []
    return [GoalMarker(id=None, atom_type=t.atom_type, cell=t.position) for t in goal.targets]


def check_goal_collisions(
    goals: Iterable[GoalMarker],
    atoms: Iterable[Atom],
    threshold: float = GOAL_THRESHOLD,
) -> List[Tuple[int, int]]:
    """
    Pair every goal marker with an atom of its type closer than `threshold`.

    Each marker and each atom is consumed at most once. Returns (goal_id, atom_id)
    pairs in marker order; the caller despawns both.
    """
    atoms = list(atoms)
    consumed: set[int] = set()
    hits: List[Tuple[int, int]] = []
    for goal in goals:
        for a in atoms:
            if a.id in consumed or a.atom_type is not goal.atom_type:
                continue
            if float(np.linalg.norm(a.pos - goal.pos)) < threshold:
                consumed.add(a.id)
                hits.append((goal.id, a.id))
                break
    return hits


def is_goal_satisfied(goal: Goal, goals: Iterable[GoalMarker], atoms: Iterable[Atom]) -> bool:
    if isinstance(goal, ReachPositions):
        return not any(True for _ in goals)
    if isinstance(goal, CreateAtom):
        return any(a.atom_type is goal.atom_type for a in atoms)
    return False
