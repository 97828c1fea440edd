# src/atom_sims/core/recording.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator
from pathlib import Path
import pickle
import lzma
import numpy as np
from typing import Dict, Tuple
if TYPE_CHECKING:
    from .world import World
    from .events import BaseEvent
    from .atoms import Atom


@dataclass
class AtomStaticSnapshot:
    """Properties of an atom that never change, stored once per recording."""
    id: int
    atom_type: str
    placed: bool

@dataclass
class AtomStateSnapshot:
    """Per-frame dynamic state of an atom."""
    pos: Tuple[float, float]
    direction: str | None = None
    speed: float = 0.0
    immune: bool = False


@dataclass
class EventSnapshot:
    t: float
    type: str               # e.g. "CollisionEvent", "SpawnEvent", ...
    a_id: int | None = None
    b_id: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)

@dataclass
class FrameSnapshot:
    t: float
    state: str
    atoms: dict[int, AtomStateSnapshot]
    goals: list[Tuple[str, Tuple[int, int]]] = field(default_factory=list)
    events: list[EventSnapshot] = field(default_factory=list)


@dataclass
class SimulationRecording:
    """
    Frozen record of a full simulation run.

    `meta` holds config, level name, preset path, etc.
    """
    frames: list[FrameSnapshot] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)
    atom_static: Dict[int, AtomStaticSnapshot] = field(default_factory=dict)

    def add_frame(self, frame: FrameSnapshot) -> None:
        self.frames.append(frame)

    @property
    def times(self) -> list[float]:
        return [f.t for f in self.frames]

    @property
    def t_end(self) -> float | None:
        """Time of the last frame, or None if no frames."""
        if not self.frames:
            return None
        return self.frames[-1].t

    def iter_events(self) -> Iterator[EventSnapshot]:
        """Iterate over all EventSnapshots in time order."""
        for frame in self.frames:
            for ev in frame.events:
                yield ev

    def save(self, path: str | Path) -> None:
        path = Path(path)
        with lzma.open(path, "wb") as f:
            pickle.dump(self, f, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, path: str | Path) -> "SimulationRecording":
        path = Path(path)
        with lzma.open(path, "rb") as f:
            rec = pickle.load(f)
        return rec

def make_atom_static_snapshot(atom: "Atom") -> AtomStaticSnapshot:
    return AtomStaticSnapshot(
        id=atom.id,
        atom_type=atom.atom_type.value,
        placed=atom.placed,
    )

def make_atom_state_snapshot(atom: "Atom") -> AtomStateSnapshot:
    pos = np.asarray(atom.pos, dtype=float)
    movement = atom.movement
    return AtomStateSnapshot(
        pos=(float(pos[0]), float(pos[1])),
        direction=movement.direction.value if movement is not None else None,
        speed=float(movement.speed) if movement is not None else 0.0,
        immune=atom.is_immune,
    )


def snapshot_world(world: "World", t: float,
    events: list[BaseEvent],
    *,
    atom_static_registry: Dict[int, AtomStaticSnapshot]
) -> FrameSnapshot:

    atoms_state: Dict[int, AtomStateSnapshot] = {}

    for atom in world.atoms.values():
        if atom.id is None:
            raise ValueError("All atoms must have an id before snapshotting")

        # static snapshot exactly once per atom id
        if atom.id not in atom_static_registry:
            atom_static_registry[atom.id] = make_atom_static_snapshot(atom)

        atoms_state[atom.id] = make_atom_state_snapshot(atom)

    event_snaps: list[EventSnapshot] = []
    for e in events:
        event_snaps.append(
            EventSnapshot(
                t=e.t,
                type=type(e).__name__,
                a_id=getattr(e, "a_id", None),
                b_id=getattr(e, "b_id", None),
                payload=e.to_payload_dict()
            )
        )
    goals = [(g.atom_type.value, g.cell) for g in world.goals.values()]
    return FrameSnapshot(t=t, state=world.state.value, atoms=atoms_state, goals=goals, events=event_snaps)
