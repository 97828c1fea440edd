# tests/test_recording.py
"""Tests for headless runs: run_simulation, RunPolicy and saved recordings."""

from pathlib import Path

from atom_sims.core import (
    AtomType,
    CreateAtom,
    Direction,
    GameState,
    RunPolicy,
    SimAction,
    SimConfig,
    SimulationRecording,
    run_simulation,
)
from atom_sims.presets.basic import apply_placements, levels_from_dicts, make_world
from atom_sims.utils.preset_loader import load_preset

PRESETS_DIR = Path(__file__).resolve().parent.parent / "presets"


def _fusion_world(make_world, level_atom):
    world = make_world(
        level_atom(AtomType.BASIC, (2, 0)),
        level_atom(AtomType.BASIC, (-2, 0), Direction.E),
        goal=CreateAtom(AtomType.SPLITTING),
    )
    world.toggle_running()
    return world


class TestRunSimulation:
    def test_records_every_step_without_policy(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.BASIC, (0, 0), Direction.N))
        world.toggle_running()
        recording = run_simulation(world, 30, dt)
        assert len(recording.frames) == 30
        assert recording.t_end == world.time
        assert recording.frames[0].state == "running"

    def test_stops_on_completion(self, make_world, level_atom, dt):
        world = _fusion_world(make_world, level_atom)
        recording = run_simulation(world, 1000, dt, policy=RunPolicy(n_steps=1000))
        assert world.state is GameState.LEVEL_COMPLETE
        assert len(recording.frames) < 1000
        assert recording.frames[-1].state == "level_complete"

        types = [ev.type for ev in recording.iter_events()]
        assert "CollisionEvent" in types
        assert types[-1] == "LevelCompleteEvent"
        (collision,) = [ev for ev in recording.iter_events() if ev.type == "CollisionEvent"]
        assert collision.payload["outcome"] == "fuse"
        assert collision.payload["cell"] == [2, 0]

    def test_static_snapshots_cover_every_atom(self, make_world, level_atom, dt):
        world = _fusion_world(make_world, level_atom)
        recording = run_simulation(world, 1000, dt, policy=RunPolicy(n_steps=1000))
        seen = {atom_id for frame in recording.frames for atom_id in frame.atoms}
        assert seen == set(recording.atom_static)
        assert sorted(s.atom_type for s in recording.atom_static.values()) == ["Basic", "Basic", "Splitting"]

    def test_static_snapshot_taken_once_per_atom(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.WALL, (0, 0)), level_atom(AtomType.BASIC, (5, 5), Direction.N))
        world.toggle_running()
        recording = run_simulation(world, 40, dt)
        first = dict(recording.atom_static)
        assert set(first) == set(world.atoms)
        recording_more = run_simulation(world, 5, dt)
        assert all(recording_more.atom_static[i] is not first[i] for i in first)
        assert len(recording.atom_static) == 2

    def test_without_events(self, make_world, level_atom, dt):
        world = _fusion_world(make_world, level_atom)
        recording = run_simulation(world, 1000, dt, policy=RunPolicy(n_steps=1000), record_events=False)
        assert list(recording.iter_events()) == []

    def test_save_and_load(self, make_world, level_atom, dt, tmp_path):
        world = _fusion_world(make_world, level_atom)
        recording = run_simulation(world, 200, dt, policy=RunPolicy(n_steps=200))
        recording.meta = {"preset": None}
        path = tmp_path / "recording.pkl.xz"
        recording.save(path)
        loaded = SimulationRecording.load(path)
        assert loaded.times == recording.times
        assert loaded.meta == {"preset": None}
        assert [ev.type for ev in loaded.iter_events()] == [ev.type for ev in recording.iter_events()]


class TestRunPolicy:
    def test_step_limit(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.BASIC, (0, 0), Direction.N))
        world.toggle_running()
        recording = run_simulation(world, 500, dt, policy=RunPolicy(n_steps=20))
        assert len(recording.frames) == 20

    def test_idle_board_stops(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.WALL, (0, 0)))
        world.toggle_running()
        recording = run_simulation(world, 500, dt, policy=RunPolicy(n_steps=500, max_idle_steps=10))
        assert len(recording.frames) == 10

    def test_complete_without_stop_continues(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.BASIC, (0, 0)), goal=CreateAtom(AtomType.BASIC))
        world.toggle_running()
        policy = RunPolicy(n_steps=50, stop_on_complete=False)
        recording = run_simulation(world, 500, dt, policy=policy)
        assert len(recording.frames) == 50
        assert world.state is GameState.LEVEL_COMPLETE

    def test_play_through_only_advances_when_levels_remain(self, make_world, level_atom, dt):
        world = make_world(level_atom(AtomType.BASIC, (0, 0)), goal=CreateAtom(AtomType.BASIC))
        world.toggle_running()
        world.step(dt)
        decision = RunPolicy(play_through=True).decide(step=1, world=world)
        assert decision.action is SimAction.STOP


class TestCampaignPlayThrough:
    def test_campaign_preset_completes_every_level(self):
        preset = load_preset(PRESETS_DIR / "campaign.yaml")
        cfg = SimConfig.from_dict(preset.sim)
        world = make_world(cfg, levels_from_dicts(preset.levels))

        placed = []

        def place(w):
            placed.append(apply_placements(w, preset.placements_for(w.levels.index)))

        place(world)
        world.toggle_running()
        policy = RunPolicy(n_steps=3000, play_through=True)
        recording = run_simulation(world, 3000, cfg.dt, policy=policy, on_level_start=place)

        assert placed == [1, 1, 0]
        assert world.levels.index == 2
        assert world.state is GameState.LEVEL_COMPLETE
        completed = [ev.payload["level_index"] for ev in recording.iter_events() if ev.type == "LevelCompleteEvent"]
        assert completed == [0, 1, 2]
        outcomes = [ev.payload["outcome"] for ev in recording.iter_events() if ev.type == "CollisionEvent"]
        assert outcomes == ["fuse", "bounce", "reactive_burst", "antimatter"]
