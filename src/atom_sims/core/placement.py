# src/atom_sims/core/placement.py

from __future__ import annotations
from typing import Dict, Iterator, Set, Tuple

from .atoms import AtomType, Cell


class GridOccupancy:
    """Grid cells taken by player-placed atoms. Only consulted while placing."""

    def __init__(self):
        self._cells: Set[Cell] = set()

    def __contains__(self, cell: Cell) -> bool:
        return tuple(cell) in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def is_occupied(self, cell: Cell) -> bool:
        return tuple(cell) in self._cells

    def occupy(self, cell: Cell) -> bool:
        """Claim a cell; False if somebody already holds it."""
        cell = tuple(cell)
        if cell in self._cells:
            return False
        self._cells.add(cell)
        return True

    def release(self, cell: Cell) -> None:
        self._cells.discard(tuple(cell))

    def clear(self) -> None:
        self._cells.clear()


class PlacedAtoms:
    """Atoms the player put down for the current level, by cell. Cleared on reset."""

    def __init__(self):
        self._atoms: Dict[Cell, AtomType] = {}

    def __len__(self) -> int:
        return len(self._atoms)

    def __contains__(self, cell: Cell) -> bool:
        return tuple(cell) in self._atoms

    def __iter__(self) -> Iterator[Tuple[Cell, AtomType]]:
        return iter(list(self._atoms.items()))

    def get(self, cell: Cell) -> AtomType | None:
        return self._atoms.get(tuple(cell))

    def place(self, cell: Cell, atom_type: AtomType) -> None:
        self._atoms[tuple(cell)] = atom_type

    def remove(self, cell: Cell) -> AtomType | None:
        return self._atoms.pop(tuple(cell), None)

    def clear(self) -> None:
        self._atoms.clear()
