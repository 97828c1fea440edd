# tests/test_goals.py
"""Tests for goal markers and win conditions."""

from atom_sims.core import (
    AtomType,
    CreateAtom,
    Direction,
    GameState,
    GoalMarker,
    GoalReachedEvent,
    GoalTarget,
    LevelCompleteEvent,
    NoGoal,
    ReachPositions,
    StateChangeEvent,
    check_goal_collisions,
    is_goal_satisfied,
)


def _marker(goal_id, atom_type, cell):
    return GoalMarker(id=goal_id, atom_type=atom_type, cell=cell)


class TestCheckGoalCollisions:
    def test_matching_type_within_threshold(self, atom):
        a = atom(AtomType.SPLITTING, (3.6, 2.0), Direction.E)
        assert check_goal_collisions([_marker(1, AtomType.SPLITTING, (4, 2))], [a]) == [(1, a.id)]

    def test_threshold_is_strict(self, atom):
        a = atom(AtomType.SPLITTING, (3.5, 2.0), Direction.E)
        assert check_goal_collisions([_marker(1, AtomType.SPLITTING, (4, 2))], [a]) == []

    def test_wrong_type_is_ignored(self, atom):
        a = atom(AtomType.BASIC, (4, 2))
        assert check_goal_collisions([_marker(1, AtomType.SPLITTING, (4, 2))], [a]) == []

    def test_one_atom_satisfies_one_goal(self, atom):
        a = atom(AtomType.BASIC, (0, 0))
        goals = [_marker(1, AtomType.BASIC, (0, 0)), _marker(2, AtomType.BASIC, (0, 0))]
        assert check_goal_collisions(goals, [a]) == [(1, a.id)]

    def test_two_atoms_two_goals(self, atom):
        a = atom(AtomType.BASIC, (0, 0))
        b = atom(AtomType.BASIC, (0.1, 0.0))
        goals = [_marker(1, AtomType.BASIC, (0, 0)), _marker(2, AtomType.BASIC, (0, 0))]
        assert check_goal_collisions(goals, [a, b]) == [(1, a.id), (2, b.id)]


class TestIsGoalSatisfied:
    def test_no_goal_never_wins(self, atom):
        assert not is_goal_satisfied(NoGoal(), [], [atom(AtomType.BASIC, (0, 0))])

    def test_reach_positions_needs_all_markers_gone(self):
        goal = ReachPositions((GoalTarget(AtomType.BASIC, (1, 1)),))
        assert not is_goal_satisfied(goal, [_marker(1, AtomType.BASIC, (1, 1))], [])
        assert is_goal_satisfied(goal, [], [])

    def test_create_atom(self, atom):
        goal = CreateAtom(AtomType.ANTIMATTER)
        assert not is_goal_satisfied(goal, [], [atom(AtomType.BASIC, (0, 0))])
        assert is_goal_satisfied(goal, [], [atom(AtomType.ANTIMATTER, (9, -9))])


class TestWinScenarios:
    def test_reach_positions(self, make_world, level_atom, run_until):
        goal = ReachPositions((GoalTarget(AtomType.SPLITTING, (4, 2)),))
        world = make_world(level_atom(AtomType.SPLITTING, (0, 2), Direction.E), goal=goal)
        assert len(world.goals) == 1
        world.toggle_running()

        _, events = run_until(world, lambda w, ev: any(isinstance(e, GoalReachedEvent) for e in ev))
        assert world.goals == {}
        assert world.atoms_of_type(AtomType.SPLITTING) == []
        # the win lands on the same tick
        assert world.state is GameState.LEVEL_COMPLETE
        assert any(isinstance(e, StateChangeEvent) and e.new == "level_complete" for e in events)
        assert any(isinstance(e, LevelCompleteEvent) for e in events)

    def test_goal_consumed_without_winning_while_others_remain(self, make_world, level_atom, run_until):
        goal = ReachPositions((
            GoalTarget(AtomType.SPLITTING, (4, 2)),
            GoalTarget(AtomType.BASIC, (9, 9)),
        ))
        world = make_world(level_atom(AtomType.SPLITTING, (0, 2), Direction.E), goal=goal)
        world.toggle_running()
        run_until(world, lambda w, ev: any(isinstance(e, GoalReachedEvent) for e in ev))
        assert len(world.goals) == 1
        assert world.state is GameState.RUNNING

    def test_create_antimatter(self, make_world, level_atom, run_until):
        world = make_world(
            level_atom(AtomType.REACTIVE, (3, 0)),
            level_atom(AtomType.SPLITTING, (0, 0), Direction.E),
            goal=CreateAtom(AtomType.ANTIMATTER),
        )
        world.toggle_running()
        run_until(world, lambda w, ev: w.state is GameState.LEVEL_COMPLETE)
        antimatter = world.atoms_of_type(AtomType.ANTIMATTER)
        assert len(antimatter) == 1
        assert antimatter[0].cell == (3, 0)

    def test_sandbox_never_completes(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.BASIC, (0, 0), Direction.N))
        world.toggle_running()
        for _ in range(200):
            world.step(dt)
        assert world.state is GameState.RUNNING
