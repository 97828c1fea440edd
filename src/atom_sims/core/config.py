# src/atom_sims/core/config.py

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass
class SimConfig:
    collision_epsilon: float = 0.05   # max offset from a grid intersection to count as "on" it
    immunity_duration: float = 0.5    # seconds a reaction product ignores collisions
    default_speed: float = 2.0        # grid units per second
    goal_threshold: float = 0.5       # distance at which an atom satisfies a goal marker
    tick_rate: int = 60               # simulation ticks per second
    level_index: int = 0

    @property
    def dt(self) -> float:
        return 1.0 / self.tick_rate

    @classmethod
    def from_args(cls, args) -> "SimConfig":
        return cls(**_overrides_from_args(args))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "SimConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown sim config keys: {sorted(unknown)}")
        return cls(**data)

    def merged_with_args(self, args) -> "SimConfig":
        """Values given on the command line override the ones in this config."""
        kwargs = {f.name: getattr(self, f.name) for f in fields(self)}
        kwargs.update(_overrides_from_args(args))
        return SimConfig(**kwargs)


def _overrides_from_args(args) -> dict:
    kwargs = {}
    for f in fields(SimConfig):
        value = getattr(args, f.name, None)
        if value is not None:
            kwargs[f.name] = value
    # --level on the command line
    if getattr(args, "level", None) is not None:
        kwargs["level_index"] = args.level
    return kwargs
