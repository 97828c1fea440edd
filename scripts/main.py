# scripts/main.py

from __future__ import annotations

import logging
from pathlib import Path
from dataclasses import asdict

from atom_sims.core import run_simulation, RunPolicy, SimConfig, GameState, World
from atom_sims.presets.basic import make_world, levels_from_dicts, apply_placements
from atom_sims.utils.cli import build_parser
from atom_sims.utils.preset_loader import load_preset

PROJECT_ROOT = Path(__file__).parent.parent


def _resolve(path: str) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute() or p.exists():
        return p
    return PROJECT_ROOT / p


def main():
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    preset = load_preset(_resolve(args.preset)) if args.preset is not None else None
    sim_config = SimConfig.from_dict(preset.sim if preset else {}).merged_with_args(args)
    levels = levels_from_dicts(preset.levels) if preset is not None and preset.levels else None

    # 1. Build world and lay out the level
    world = make_world(sim_config, levels)
    level = world.current_level()
    if level is None:
        print("No playable level, nothing to simulate.")
        return

    def place_for_current_level(w: World) -> None:
        if preset is None or w.levels.index is None:
            return
        placements = preset.placements_for(w.levels.index)
        accepted = apply_placements(w, placements)
        print(f"Level {w.levels.index}: placed {accepted}/{len(placements)} atoms")

    print(f"Level {world.levels.index}: {level.name or 'unnamed'} - {level.description}")
    place_for_current_level(world)
    world.toggle_running()

    # 2. Run and record
    dt = sim_config.dt
    n_steps = int(args.duration * sim_config.tick_rate)
    policy = RunPolicy(
        n_steps=n_steps,
        play_through=args.play_through,
        max_idle_steps=int(args.max_idle_seconds * sim_config.tick_rate),
    )
    recording = run_simulation(
        world, n_steps, dt,
        log_interval=sim_config.tick_rate,
        policy=policy,
        on_level_start=place_for_current_level,
    )
    outcome = "complete" if world.state is GameState.LEVEL_COMPLETE else world.state.value
    print(f"Simulation finished at t={world.time:.3f}s: level {world.levels.index} {outcome}, "
          f"{world.n_atoms} atoms left, {len(recording.frames)} frames recorded")

    recording.meta = {
        "sim_config": asdict(sim_config),
        "preset": str(preset.preset_path) if preset is not None else None,
        "final_state": world.state.value,
        "engine_version": "0.1.0",
    }

    # 3. Output
    if args.no_save:
        return
    exp_dir = PROJECT_ROOT / args.outdir / args.exp_name
    exp_dir.mkdir(exist_ok=True, parents=True)
    recording_path = exp_dir / "recording.pkl.xz"
    recording.save(recording_path)
    print(f"Recording saved to {recording_path}")

if __name__ == "__main__":
    main()
