from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Sequence
import logging
from atom_sims.core import (
    World,
    SimConfig,
    AtomType,
    CreateAtom,
    Direction,
    GoalTarget,
    Level,
    LevelAtom,
    LevelPack,
    Movement,
    ReachPositions,
    sandbox_level,
)

logger = logging.getLogger(__name__)


def default_levels(sim_config: SimConfig | None = None) -> List[Level]:
    """The built-in campaign, easiest first, followed by the sandbox."""
    speed = (sim_config or SimConfig()).default_speed

    def moving(atom_type: AtomType, position, direction: Direction) -> LevelAtom:
        return LevelAtom(atom_type, position, Movement(direction, speed))

    return [
        Level(
            name="Fusion",
            description="Two basic atoms that meet fuse into a splitting atom. Make one.",
            atoms=(moving(AtomType.BASIC, (-3, 0), Direction.E),),
            goal=CreateAtom(AtomType.SPLITTING),
            placeable_atoms=(AtomType.BASIC,),
        ),
        Level(
            name="Fission",
            description="A moving splitting atom breaks into two basic atoms at 45 degrees.",
            atoms=(moving(AtomType.SPLITTING, (0, -3), Direction.N),),
            goal=ReachPositions((
                GoalTarget(AtomType.BASIC, (2, 2)),
                GoalTarget(AtomType.BASIC, (-2, 2)),
            )),
            placeable_atoms=(AtomType.BASIC,),
        ),
        Level(
            name="Rebound",
            description="Walls send moving atoms back the way they came.",
            atoms=(moving(AtomType.SPLITTING, (-2, 0), Direction.E),),
            goal=ReachPositions((GoalTarget(AtomType.SPLITTING, (-4, 0)),)),
            placeable_atoms=(AtomType.WALL,),
        ),
        Level(
            name="Antimatter",
            description="A splitting atom hitting a reactive atom leaves antimatter behind.",
            atoms=(moving(AtomType.SPLITTING, (-3, 0), Direction.E),),
            goal=CreateAtom(AtomType.ANTIMATTER),
            placeable_atoms=(AtomType.REACTIVE,),
        ),
        sandbox_level(),
    ]


def levels_from_dicts(data: Iterable[Mapping[str, Any]]) -> List[Level]:
    return [Level.from_dict(d) for d in data]


def make_world(sim_config: SimConfig, levels: Sequence[Level] | None = None) -> World:
    levels = list(levels) if levels is not None else default_levels(sim_config)
    world = World(levels=LevelPack(levels), config=sim_config)
    if not world.load_level(sim_config.level_index):
        logger.warning("Level %d could not be loaded; world is idle", sim_config.level_index)
    return world


def apply_placements(world: World, placements: Iterable[Mapping[str, Any]]) -> int:
    """Place atoms described as {type, position} mappings. Returns how many were accepted."""
    accepted = 0
    for p in placements:
        if world.place_atom(AtomType.parse(p["type"]), tuple(p["position"])):
            accepted += 1
    return accepted
