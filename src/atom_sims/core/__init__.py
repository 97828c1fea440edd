# src/atom_sims/core/__init__.py

from .config import SimConfig
from .world import World, run_simulation
from .movement import DEFAULT_SPEED, Direction, Movement, integrate_movement
from .atoms import Atom, AtomType, GoalMarker, ImmunityTimer, create_atom
from .collision import COLLISION_EPSILON, CollisionGroup, detect_collisions
from .reactions import Reaction, ReactionOutcome, apply_reaction, get_split_directions, resolve_collision
from .immunity import IMMUNITY_DURATION, grant_immunity, tick_immunity
from .goals import (
    GOAL_THRESHOLD,
    CreateAtom,
    Goal,
    GoalTarget,
    NoGoal,
    ReachPositions,
    check_goal_collisions,
    is_goal_satisfied,
)
from .level import Level, LevelAtom, LevelPack, sandbox_level
from .placement import GridOccupancy, PlacedAtoms
from .state import GameState, GameStateMachine, Trigger
from .sim_decisions import RunPolicy, SimAction, SimDecision
from .recording import FrameSnapshot, SimulationRecording
from .errors import (
    AtomSimError,
    InvalidLevelReference,
    InvalidTransition,
    NoFurtherLevel,
    NoLevelLoaded,
)
from .events import (
    BaseEvent,
    CollisionEvent,
    SpawnEvent,
    DestroyEvent,
    GoalReachedEvent,
    PlacementEvent,
    StateChangeEvent,
    LevelCompleteEvent,
    LevelAdvanceFailedEvent,
)

__all__ = [
    "SimConfig",
    "World",
    "run_simulation",
    "DEFAULT_SPEED",
    "Direction",
    "Movement",
    "integrate_movement",
    "Atom",
    "AtomType",
    "GoalMarker",
    "ImmunityTimer",
    "create_atom",
    "COLLISION_EPSILON",
    "CollisionGroup",
    "detect_collisions",
    "Reaction",
    "ReactionOutcome",
    "apply_reaction",
    "get_split_directions",
    "resolve_collision",
    "IMMUNITY_DURATION",
    "grant_immunity",
    "tick_immunity",
    "GOAL_THRESHOLD",
    "CreateAtom",
    "Goal",
    "GoalTarget",
    "NoGoal",
    "ReachPositions",
    "check_goal_collisions",
    "is_goal_satisfied",
    "Level",
    "LevelAtom",
    "LevelPack",
    "sandbox_level",
    "GridOccupancy",
    "PlacedAtoms",
    "GameState",
    "GameStateMachine",
    "Trigger",
    "RunPolicy",
    "SimAction",
    "SimDecision",
    "FrameSnapshot",
    "SimulationRecording",
    "AtomSimError",
    "InvalidLevelReference",
    "InvalidTransition",
    "NoFurtherLevel",
    "NoLevelLoaded",
    "BaseEvent",
    "CollisionEvent",
    "SpawnEvent",
    "DestroyEvent",
    "GoalReachedEvent",
    "PlacementEvent",
    "StateChangeEvent",
    "LevelCompleteEvent",
    "LevelAdvanceFailedEvent",
]
