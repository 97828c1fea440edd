# src/atom_sims/core/world.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterable, List, Set
import logging

from .atoms import Atom, AtomType, Cell, GoalMarker, create_atom
from .collision import detect_collisions
from .config import SimConfig
from .errors import InvalidLevelReference, InvalidTransition, NoFurtherLevel, NoLevelLoaded
from .events import (
    BaseEvent,
    DestroyEvent,
    GoalReachedEvent,
    LevelAdvanceFailedEvent,
    LevelCompleteEvent,
    PlacementEvent,
    SpawnEvent,
    StateChangeEvent,
)
from .goals import check_goal_collisions, goal_markers_for, is_goal_satisfied
from .immunity import tick_immunity
from .level import Level, LevelPack
from .movement import integrate_movement
from .placement import GridOccupancy, PlacedAtoms
from .reactions import ReactionOutcome, apply_reaction, resolve_collision
from .recording import SimulationRecording, snapshot_world
from .sim_decisions import RunPolicy, SimAction
from .state import GameState, GameStateMachine, Trigger, next_state

logger = logging.getLogger(__name__)


@dataclass
class World:
    """
    The whole simulation context: atoms, goal markers, placement registries,
    the level pack and the life-cycle state machine.

    Collaborators talk to it through the control methods (toggle_running,
    place_atom, ...) and read what happened from `drain_events()`.
    """
    levels: LevelPack = field(default_factory=LevelPack)
    config: SimConfig = field(default_factory=SimConfig)
    atoms: dict[int, Atom] = field(default_factory=dict)
    goals: dict[int, GoalMarker] = field(default_factory=dict)
    occupancy: GridOccupancy = field(default_factory=GridOccupancy)
    placed: PlacedAtoms = field(default_factory=PlacedAtoms)
    state_machine: GameStateMachine = field(default_factory=GameStateMachine)
    time: float = 0.0
    _next_id: int = 0
    _outbox: List[BaseEvent] = field(default_factory=list)
    _passing: Set[FrozenSet[int]] = field(default_factory=set)  # pass-through pairs seen last tick

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)

    def new_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # ------------------------------------------------------------------
    # population

    def add_atom(self, atom: Atom) -> Atom:
        if atom.id is None:
            atom.id = self.new_id()
        elif atom.id in self.atoms:
            raise ValueError(f"Atom id {atom.id} already exists in world")
        self.atoms[atom.id] = atom
        return atom

    def spawn_atom(self, atom: Atom, reason: str = "unknown") -> List[BaseEvent]:
        self.add_atom(atom)
        return [SpawnEvent(t=self.time, child_id=atom.id, atom_type=atom.atom_type.value, reason=reason)]

    def despawn_atom(self, atom_id: int, reason: str = "unknown") -> List[BaseEvent]:
        if self.atoms.pop(atom_id, None) is None:
            return []
        return [DestroyEvent(t=self.time, body_id=atom_id, reason=reason)]

    def add_goal(self, goal: GoalMarker) -> GoalMarker:
        if goal.id is None:
            goal.id = self.new_id()
        self.goals[goal.id] = goal
        return goal

    def atoms_of_type(self, atom_type: AtomType) -> List[Atom]:
        return [a for a in self.atoms.values() if a.atom_type is atom_type]

    def atoms_at(self, cell: Cell) -> List[Atom]:
        return [a for a in self.atoms.values() if a.cell == tuple(cell)]

    # ------------------------------------------------------------------
    # level

    def current_level(self) -> Level | None:
        try:
            return self.levels.current()
        except NoLevelLoaded as exc:
            logger.error("%s", exc)
        except InvalidLevelReference as exc:
            logger.warning("Level not available yet: %s", exc)
        return None

    def initialise_level(self) -> List[BaseEvent]:
        """Clear every level entity and lay out the current level plus the player's placed atoms."""
        events: List[BaseEvent] = []
        for atom_id in list(self.atoms):
            events.extend(self.despawn_atom(atom_id, reason="level_reset"))
        self.goals.clear()
        self._passing.clear()

        level = self.current_level()
        if level is None:
            return events

        for level_atom in level.atoms:
            atom = create_atom(level_atom.atom_type, level_atom.position, movement=level_atom.movement)
            events.extend(self.spawn_atom(atom, reason="level"))
        for marker in goal_markers_for(level.goal):
            self.add_goal(marker)
        for cell, atom_type in self.placed:
            events.extend(self.spawn_atom(create_atom(atom_type, cell, placed=True), reason="placed"))
        logger.debug("Level initialised with %d atoms and %d goals", self.n_atoms, len(self.goals))
        return events

    def load_level(self, index: int) -> bool:
        """Select a level and lay it out right away (used when the game screen opens)."""
        try:
            self.levels.select(index)
        except InvalidLevelReference as exc:
            logger.warning("%s", exc)
            return False
        self.placed.clear()
        self.occupancy.clear()
        self.state_machine.reset()
        self._emit(self.initialise_level())
        return True

    # ------------------------------------------------------------------
    # control surface

    def toggle_running(self) -> bool:
        """Start the level from Placement, or stop it again from Running."""
        return self._request(Trigger.TOGGLE)

    def request_reset(self) -> bool:
        """Throw away the player's placements and go back to Placement."""
        return self._request(Trigger.RESET)

    def advance_level(self) -> bool:
        """Continue from LevelComplete to the next level of the pack."""
        try:
            next_state(self._projected_state(), Trigger.CONTINUE)
        except InvalidTransition as exc:
            logger.warning("Cannot advance level: %s", exc)
            return False
        try:
            self.levels.next()
        except (NoFurtherLevel, InvalidLevelReference) as exc:
            logger.error("%s", exc)
            self._emit([LevelAdvanceFailedEvent(t=self.time, reason=str(exc))])
            return False
        self.placed.clear()
        self.occupancy.clear()
        return self._request(Trigger.CONTINUE)

    def select_level(self, index: int) -> bool:
        """Jump to any level (level select menu); goes through a reset."""
        try:
            next_state(self._projected_state(), Trigger.RESET)
            self.levels.select(index)
        except (InvalidTransition, InvalidLevelReference) as exc:
            logger.warning("Cannot select level %d: %s", index, exc)
            return False
        return self._request(Trigger.RESET)

    def place_atom(self, atom_type: AtomType, cell: Cell) -> bool:
        cell = (int(cell[0]), int(cell[1]))
        reason = self._placement_rejection(atom_type, cell)
        if reason is not None:
            logger.debug("Placement of %s at %s rejected: %s", atom_type.value, cell, reason)
            self._emit([PlacementEvent(t=self.time, cell=cell, atom_type=atom_type.value, accepted=False, reason=reason)])
            return False
        self.occupancy.occupy(cell)
        self.placed.place(cell, atom_type)
        events = self.spawn_atom(create_atom(atom_type, cell, placed=True), reason="placed")
        events.append(PlacementEvent(t=self.time, cell=cell, atom_type=atom_type.value, accepted=True))
        self._emit(events)
        return True

    def _placement_rejection(self, atom_type: AtomType, cell: Cell) -> str | None:
        if self.state is not GameState.PLACEMENT:
            return f"not placing ({self.state.value})"
        level = self.current_level()
        if level is None:
            return "no level loaded"
        if atom_type not in level.placeable_atoms:
            return f"{atom_type.value} is not placeable in this level"
        if self.occupancy.is_occupied(cell):
            return "cell occupied"
        return None

    def remove_placed_atom(self, cell: Cell) -> bool:
        """Pick a player-placed atom back up, freeing its cell."""
        cell = (int(cell[0]), int(cell[1]))
        if self.state is not GameState.PLACEMENT or cell not in self.placed:
            return False
        atom_type = self.placed.remove(cell)
        self.occupancy.release(cell)
        events: List[BaseEvent] = []
        for a in self.atoms_at(cell):
            if a.placed:
                events.extend(self.despawn_atom(a.id, reason="picked_up"))
        events.append(PlacementEvent(t=self.time, cell=cell, atom_type=atom_type.value, accepted=True, reason="removed"))
        self._emit(events)
        return True

    def drain_events(self) -> List[BaseEvent]:
        events, self._outbox = self._outbox, []
        return events

    def apply_pending(self) -> List[BaseEvent]:
        """Scheduling point: let queued state changes take effect."""
        return self._emit(self._apply_transitions())

    # ------------------------------------------------------------------
    # tick

    def step(self, dt: float) -> List[BaseEvent]:
        """
        Advance the world by dt. Order within a tick is fixed:
        state changes, immunity timers, movement, collision detection,
        reactions, goals, state changes again (so a win lands this tick).
        Outside Running, or without a level, only the state changes happen.
        """
        events = self._apply_transitions()
        if not self.state_machine.is_running:
            return self._emit(events)
        level = self.current_level()
        if level is None:
            return self._emit(events)

        tick_immunity(self.atoms.values(), dt)
        integrate_movement(self.atoms.values(), dt)
        self.time += dt

        passing: Set[FrozenSet[int]] = set()
        for group in detect_collisions(list(self.atoms.values()), epsilon=self.config.collision_epsilon):
            reaction = resolve_collision(group, immunity_duration=self.config.immunity_duration)
            if reaction.outcome is ReactionOutcome.PASS_THROUGH:
                pair = frozenset(group.atom_ids)
                passing.add(pair)
                # one notification per crossing, not per tick in range
                if pair in self._passing:
                    continue
            events.extend(apply_reaction(self, group, reaction))
        self._passing = passing

        events.extend(self._track_goals(level))
        events.extend(self._apply_transitions())
        return self._emit(events)

    def _track_goals(self, level: Level) -> List[BaseEvent]:
        events: List[BaseEvent] = []
        hits = check_goal_collisions(list(self.goals.values()), list(self.atoms.values()), self.config.goal_threshold)
        for goal_id, atom_id in hits:
            goal = self.goals.pop(goal_id)
            events.append(GoalReachedEvent(t=self.time, goal_id=goal_id, atom_id=atom_id, cell=goal.cell))
            events.extend(self.despawn_atom(atom_id, reason="goal"))
        if is_goal_satisfied(level.goal, self.goals.values(), self.atoms.values()):
            try:
                self.state_machine.request(Trigger.WIN)
            except InvalidTransition:
                logger.debug("Win already requested")
        return events

    # ------------------------------------------------------------------
    # state machine plumbing

    def _projected_state(self) -> GameState:
        return self.state_machine.pending or self.state

    def _request(self, trigger: Trigger) -> bool:
        try:
            self.state_machine.request(trigger)
        except InvalidTransition as exc:
            logger.warning("Ignoring request: %s", exc)
            return False
        return True

    def _apply_transitions(self) -> List[BaseEvent]:
        events: List[BaseEvent] = []
        for old, new in self.state_machine.apply_pending():
            logger.info("Game state %s -> %s", old.value, new.value)
            events.append(StateChangeEvent(t=self.time, old=old.value, new=new.value))
            events.extend(self._on_enter(new))
        return events

    def _on_enter(self, state: GameState) -> List[BaseEvent]:
        if state is GameState.PLACEMENT:
            return self.initialise_level()
        if state is GameState.RESTART_LEVEL:
            self.placed.clear()
            self.occupancy.clear()
        elif state is GameState.LEVEL_COMPLETE:
            return [LevelCompleteEvent(t=self.time, level_index=self.levels.index)]
        return []

    def _emit(self, events: Iterable[BaseEvent]) -> List[BaseEvent]:
        events = list(events)
        self._outbox.extend(events)
        return events


def run_simulation(
    world: World,
    n_steps: int,
    dt: float,
    log_interval: int = 600,
    *,
    policy: RunPolicy | None = None,
    on_level_start: Callable[[World], None] | None = None,
    record_events: bool = True,
) -> SimulationRecording:
    """
    Step the world forward up to n_steps and record snapshots.

    The policy (if any) can stop early or move on to the next level. After
    advancing, `on_level_start` gets the world in Placement (e.g. to place
    atoms) before it is started again.
    """
    recording = SimulationRecording()
    for step in range(n_steps):
        world.step(dt)
        all_events = world.drain_events()
        frame_events = all_events if record_events else []
        snapshot = snapshot_world(world,
                                  t=world.time,
                                  events=frame_events,
                                  atom_static_registry=recording.atom_static)
        recording.add_frame(snapshot)
        if (step + 1) % log_interval == 0:
            logger.info("Simulated %.3f seconds, %d atoms, state %s", world.time, world.n_atoms, world.state.value)

        if policy is None:
            continue
        decision = policy.decide(step=step + 1, world=world)
        if decision.action is SimAction.STOP:
            logger.info("Stopping: %s", decision.reason)
            break
        if decision.action is SimAction.ADVANCE:
            logger.info("Advancing: %s", decision.reason)
            if not world.advance_level():
                break
            world.apply_pending()
            if on_level_start is not None:
                on_level_start(world)
            world.toggle_running()

    return recording
