# tests/test_config.py
"""Tests for SimConfig, the command line parser and YAML presets."""

from argparse import Namespace
from pathlib import Path

import pytest

from atom_sims.core import AtomType, CreateAtom, GameState, ReachPositions, SimConfig
from atom_sims.presets.basic import apply_placements, default_levels, levels_from_dicts, make_world
from atom_sims.utils.cli import build_parser
from atom_sims.utils.preset_loader import load_preset

PRESETS_DIR = Path(__file__).resolve().parent.parent / "presets"


class TestSimConfig:
    def test_defaults(self):
        cfg = SimConfig()
        assert cfg.collision_epsilon == 0.05
        assert cfg.immunity_duration == 0.5
        assert cfg.default_speed == 2.0
        assert cfg.goal_threshold == 0.5
        assert cfg.dt == pytest.approx(1 / 60)

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="gravity"):
            SimConfig.from_dict({"gravity": 9.8})

    def test_from_dict_none(self):
        assert SimConfig.from_dict(None) == SimConfig()

    def test_command_line_overrides_preset(self):
        cfg = SimConfig.from_dict({"tick_rate": 120, "goal_threshold": 0.25})
        args = build_parser().parse_args(["--tick_rate", "30", "--level", "2"])
        merged = cfg.merged_with_args(args)
        assert merged.tick_rate == 30
        assert merged.level_index == 2
        assert merged.goal_threshold == 0.25

    def test_unset_arguments_keep_preset_values(self):
        cfg = SimConfig.from_dict({"tick_rate": 120})
        merged = cfg.merged_with_args(Namespace(tick_rate=None, level=None))
        assert merged == cfg

    def test_from_args(self):
        cfg = SimConfig.from_args(Namespace(collision_epsilon=0.1, level=3))
        assert cfg.collision_epsilon == 0.1
        assert cfg.level_index == 3


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.preset is None
        assert args.level is None
        assert not args.play_through
        assert args.log_level == "INFO"


class TestPresetLoader:
    def test_includes_are_deep_merged(self, tmp_path):
        (tmp_path / "base.yaml").write_text(
            "sim:\n  tick_rate: 30\n  goal_threshold: 0.4\nlevels:\n  - {description: base}\n"
        )
        (tmp_path / "top.yaml").write_text(
            "include:\n  - base.yaml\nsim:\n  tick_rate: 90\nlevels:\n  - {description: top}\n"
        )
        preset = load_preset(tmp_path / "top.yaml")
        assert preset.sim == {"tick_rate": 90, "goal_threshold": 0.4}
        # lists are replaced, not concatenated
        assert preset.levels == [{"description": "top"}]
        assert [p.name for p in preset.loaded_files] == ["base.yaml", "top.yaml"]

    def test_include_cycle(self, tmp_path):
        (tmp_path / "a.yaml").write_text("include: [b.yaml]\n")
        (tmp_path / "b.yaml").write_text("include: [a.yaml]\n")
        with pytest.raises(ValueError, match="cycle"):
            load_preset(tmp_path / "a.yaml")

    def test_root_must_be_mapping(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_preset(tmp_path / "bad.yaml")

    def test_placements_by_int_or_str_key(self, tmp_path):
        (tmp_path / "p.yaml").write_text(
            "placements:\n  0:\n    - {type: Basic, position: [0, 0]}\n  '1':\n    - {type: Wall, position: [1, 1]}\n"
        )
        preset = load_preset(tmp_path / "p.yaml")
        assert preset.placements_for(0) == [{"type": "Basic", "position": [0, 0]}]
        assert preset.placements_for(1) == [{"type": "Wall", "position": [1, 1]}]
        assert preset.placements_for(2) == []

    def test_shipped_campaign(self):
        preset = load_preset(PRESETS_DIR / "campaign.yaml")
        cfg = SimConfig.from_dict(preset.sim)
        assert cfg.tick_rate == 60
        levels = levels_from_dicts(preset.levels)
        assert [lvl.name for lvl in levels] == ["Fusion", "Rebound", "Chain reaction"]
        assert levels[0].goal == CreateAtom(AtomType.SPLITTING)
        assert isinstance(levels[1].goal, ReachPositions)
        assert levels[2].placeable_atoms == ()

    def test_shipped_sandbox(self):
        preset = load_preset(PRESETS_DIR / "sandbox.yaml")
        (level,) = levels_from_dicts(preset.levels)
        world = make_world(SimConfig.from_dict(preset.sim), [level])
        assert apply_placements(world, preset.placements_for(0)) == 2
        assert len(world.placed) == 2


class TestBuiltInLevels:
    def test_default_pack_ends_with_sandbox(self):
        levels = default_levels()
        assert levels[-1].name == "Sandbox"
        assert all(lvl.description for lvl in levels)

    def test_make_world_loads_configured_level(self):
        world = make_world(SimConfig(level_index=2))
        assert world.levels.index == 2
        assert world.state is GameState.PLACEMENT
        assert world.n_atoms == 1

    def test_make_world_with_bad_index_is_idle(self):
        world = make_world(SimConfig(level_index=99))
        assert world.levels.index is None
        assert world.current_level() is None

    def test_rejected_placements_are_not_counted(self):
        world = make_world(SimConfig(level_index=0))
        placements = [
            {"type": "Basic", "position": [0, 0]},
            {"type": "Basic", "position": [0, 0]},
            {"type": "Wall", "position": [1, 0]},
        ]
        assert apply_placements(world, placements) == 1
