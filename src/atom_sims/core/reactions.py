# src/atom_sims/core/reactions.py

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Tuple
import logging

from .atoms import Atom, AtomType, Cell, create_atom
from .collision import CollisionGroup
from .events import BaseEvent, CollisionEvent
from .immunity import IMMUNITY_DURATION
from .movement import Direction, Movement
if TYPE_CHECKING:
    from .world import World

logger = logging.getLogger(__name__)


class ReactionOutcome(str, Enum):
    REACTIVE_BURST = "reactive_burst"     # 3+ atoms collapse into one Reactive atom
    NOOP_UNDERSIZED = "noop_undersized"
    ANNIHILATE_WALL = "annihilate_wall"   # Wall + Antimatter
    BOUNCE = "bounce"
    ABSORB = "absorb"                     # stationary atom against a Wall
    FUSE = "fuse"
    ANTIMATTER = "antimatter"             # Reactive + Splitting
    ANTIMATTER_SPLIT = "antimatter_split" # Basic + Antimatter
    SPLIT = "split"
    PASS_THROUGH = "pass_through"
    DEGENERATE = "degenerate"
    UNMODELED = "unmodeled"


@dataclass
class Reaction:
    outcome: ReactionOutcome
    despawn: List[int] = field(default_factory=list)
    spawn: List[Atom] = field(default_factory=list)


_SPLIT_DIRECTIONS = {
    Direction.N: (Direction.NE, Direction.NW),
    Direction.E: (Direction.NE, Direction.SE),
    Direction.S: (Direction.SE, Direction.SW),
    Direction.W: (Direction.SW, Direction.NW),
    Direction.NE: (Direction.N, Direction.E),
    Direction.SE: (Direction.E, Direction.S),
    Direction.SW: (Direction.S, Direction.W),
    Direction.NW: (Direction.W, Direction.N),
}


def get_split_directions(direction: Direction) -> Tuple[Direction, Direction]:
    """The two directions 45 degrees either side of `direction`."""
    return _SPLIT_DIRECTIONS[direction]


def resolve_collision(group: CollisionGroup, immunity_duration: float = IMMUNITY_DURATION) -> Reaction:
    """
    Decide what a collision group turns into. Pure: nothing is despawned or
    spawned here, the returned Reaction describes it.

    Precedence, first match wins:
      - 3 or more members: all despawn, one stationary Reactive atom appears
      - fewer than 2 members: nothing happens
      - exactly 2 members: the pairwise table in `_resolve_pair`
    Every product carries an immunity timer of `immunity_duration`.
    """
    if group.size >= 3:
        product = _product(AtomType.REACTIVE, group.cell, None, immunity_duration)
        return Reaction(ReactionOutcome.REACTIVE_BURST, despawn=group.atom_ids, spawn=[product])
    if group.size < 2:
        return Reaction(ReactionOutcome.NOOP_UNDERSIZED)
    a, b = group.members
    return _resolve_pair(a, b, group.cell, immunity_duration)


def _resolve_pair(a: Atom, b: Atom, cell: Cell, immunity: float) -> Reaction:
    types = {a.atom_type, b.atom_type}
    both = [a.id, b.id]
    # first moving input wins
    movement = a.movement or b.movement

    if types == {AtomType.WALL, AtomType.ANTIMATTER}:
        return Reaction(ReactionOutcome.ANNIHILATE_WALL, despawn=both)

    if AtomType.WALL in types:
        other = b if a.atom_type is AtomType.WALL else a
        if other.movement is None:
            return Reaction(ReactionOutcome.ABSORB, despawn=[other.id])
        bounced = _product(other.atom_type, cell, other.movement.reversed(), immunity)
        return Reaction(ReactionOutcome.BOUNCE, despawn=[other.id], spawn=[bounced])

    if a.atom_type is AtomType.BASIC and b.atom_type is AtomType.BASIC:
        fused = _product(AtomType.SPLITTING, cell, movement, immunity)
        return Reaction(ReactionOutcome.FUSE, despawn=both, spawn=[fused])

    if types == {AtomType.REACTIVE, AtomType.SPLITTING}:
        product = _product(AtomType.ANTIMATTER, cell, None, immunity)
        return Reaction(ReactionOutcome.ANTIMATTER, despawn=both, spawn=[product])

    if types == {AtomType.BASIC, AtomType.ANTIMATTER}:
        if movement is None:
            return _degenerate(a, b, cell, immunity)
        return Reaction(
            ReactionOutcome.ANTIMATTER_SPLIT,
            despawn=both,
            spawn=_split_products(movement.turned(movement.direction.opposite()), cell, immunity),
        )

    if AtomType.SPLITTING in types:
        if movement is None:
            return _degenerate(a, b, cell, immunity)
        return Reaction(ReactionOutcome.SPLIT, despawn=both, spawn=_split_products(movement, cell, immunity))

    if AtomType.ANTIMATTER in types:
        return Reaction(ReactionOutcome.PASS_THROUGH)

    logger.warning(
        "Unmodeled collision between %s and %s at %s; removing both",
        a.atom_type.value, b.atom_type.value, cell,
    )
    return Reaction(ReactionOutcome.UNMODELED, despawn=both)


def _split_products(movement: Movement, cell: Cell, immunity: float) -> List[Atom]:
    dir1, dir2 = get_split_directions(movement.direction)
    return [
        _product(AtomType.BASIC, cell, movement.turned(dir1), immunity),
        _product(AtomType.BASIC, cell, movement.turned(dir2), immunity),
    ]


def _degenerate(a: Atom, b: Atom, cell: Cell, immunity: float) -> Reaction:
    logger.warning(
        "Collision between two stationary atoms (%s, %s) at %s. This shouldn't happen.",
        a.atom_type.value, b.atom_type.value, cell,
    )
    return Reaction(
        ReactionOutcome.DEGENERATE,
        despawn=[a.id, b.id],
        spawn=[_product(AtomType.BASIC, cell, None, immunity)],
    )


def _product(atom_type: AtomType, cell: Cell, movement: Movement | None, immunity: float) -> Atom:
    return create_atom(atom_type, cell, movement=movement, immunity=immunity)


def apply_reaction(world: World, group: CollisionGroup, reaction: Reaction) -> List[BaseEvent]:
    """
    Carry out a Reaction on the world: despawn inputs, spawn products and
    emit the collision notification. Returns every event produced.
    """
    events: List[BaseEvent] = [
        CollisionEvent(
            t=world.time,
            cell=group.cell,
            atom_ids=group.atom_ids,
            atom_types=[m.atom_type.value for m in group.members],
            outcome=reaction.outcome.value,
        )
    ]
    for atom_id in reaction.despawn:
        events.extend(world.despawn_atom(atom_id, reason=reaction.outcome.value))
    for product in reaction.spawn:
        events.extend(world.spawn_atom(product, reason=reaction.outcome.value))
    return events
