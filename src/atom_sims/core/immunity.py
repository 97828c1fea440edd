# src/atom_sims/core/immunity.py

from __future__ import annotations
from typing import Iterable, List
from .atoms import Atom, ImmunityTimer

IMMUNITY_DURATION = 0.5


def grant_immunity(atom: Atom, duration: float = IMMUNITY_DURATION) -> Atom:
    atom.immunity = ImmunityTimer(float(duration))
    return atom


def tick_immunity(atoms: Iterable[Atom], dt: float) -> List[int]:
    """
    Count down every running cooldown by dt and drop the ones that finished.
    Returns the ids of atoms that are eligible for collisions again.
    """
    released: List[int] = []
    for a in atoms:
        if a.immunity is None:
            continue
        if a.immunity.tick(dt):
            a.immunity = None
            released.append(a.id)
    return released
