# src/atom_sims/core/events.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple
from abc import ABC


@dataclass(kw_only=True)
class BaseEvent(ABC):
    """Marker base class so you can type on 'list[BaseEvent]'."""
    t: float  # simulation time when this event occurred
    a_id: int | None = None
    b_id: int | None = None
    def to_payload_dict(self) -> dict:
        """Convert event-specific data to a serializable dict."""
        return {}

@dataclass(kw_only=True)
class CollisionEvent(BaseEvent):
    cell: Tuple[int, int]
    atom_ids: List[int] = field(default_factory=list)
    atom_types: List[str] = field(default_factory=list)
    outcome: str = "unknown"

    def __post_init__(self):
        if self.atom_ids:
            self.a_id = self.atom_ids[0]
        if len(self.atom_ids) > 1:
            self.b_id = self.atom_ids[1]

    def to_payload_dict(self) -> dict:
        return {
            "cell": list(self.cell),
            "atom_ids": list(self.atom_ids),
            "atom_types": list(self.atom_types),
            "outcome": self.outcome,
        }


@dataclass
class SpawnEvent(BaseEvent):
    child_id: int
    atom_type: str
    reason: str = "unknown"

    def __post_init__(self):
        self.a_id = self.child_id

    def to_payload_dict(self) -> dict:
        return {
            "atom_type": self.atom_type,
            "reason": self.reason,
        }

@dataclass
class DestroyEvent(BaseEvent):
    body_id: int
    reason: str = "unknown"

    def __post_init__(self):
        self.a_id = self.body_id

    def to_payload_dict(self) -> dict:
        payload = super().to_payload_dict()
        payload.update({
            "reason": self.reason
        })
        return payload


@dataclass
class GoalReachedEvent(BaseEvent):
    goal_id: int
    atom_id: int
    cell: Tuple[int, int]

    def __post_init__(self):
        self.a_id = self.goal_id
        self.b_id = self.atom_id

    def to_payload_dict(self) -> dict:
        return {"cell": list(self.cell)}


@dataclass
class PlacementEvent(BaseEvent):
    cell: Tuple[int, int]
    atom_type: str | None
    accepted: bool
    reason: str = ""

    def to_payload_dict(self) -> dict:
        return {
            "cell": list(self.cell),
            "atom_type": self.atom_type,
            "accepted": self.accepted,
            "reason": self.reason,
        }


@dataclass
class StateChangeEvent(BaseEvent):
    old: str
    new: str

    def to_payload_dict(self) -> dict:
        return {"old": self.old, "new": self.new}


@dataclass
class LevelCompleteEvent(BaseEvent):
    level_index: int | None

    def to_payload_dict(self) -> dict:
        return {"level_index": self.level_index}


@dataclass
class LevelAdvanceFailedEvent(BaseEvent):
    reason: str

    def to_payload_dict(self) -> dict:
        return {"reason": self.reason}
