import argparse

def build_parser():
    parser = argparse.ArgumentParser(description='Run an atom puzzle level headlessly and record it')
    parser.add_argument('--exp_name', type=str, default='run', metavar='N',
                        help='experiment name, used as the output sub-directory (default: run)')
    parser.add_argument('--preset', type=str, default=None, metavar='PATH',
                        help='YAML preset with sim settings, levels and placements (default: built-in levels)')
    parser.add_argument('--level', type=int, default=None, metavar='N',
                        help='index of the level to play (default: from preset, else 0)')
    parser.add_argument('--duration', type=float, default=30.0, metavar='N',
                        help='maximum simulated seconds (default: 30.0)')
    parser.add_argument('--tick_rate', type=int, default=None, metavar='N',
                        help='simulation ticks per second (default: 60)')
    parser.add_argument('--outdir', type=str, default='results', metavar='N',
                        help='directory to save the recording (default: results)')
    parser.add_argument(
        "--play_through",
        action='store_true',
        help="after completing a level, continue with the next one",
    )
    parser.add_argument(
        "--max_idle_seconds",
        type=float,
        default=2.0,
        help="stop once no atom has moved for this long (default: 2.0)",
    )
    parser.add_argument(
        "--no_save",
        action='store_true',
        help="do not write the recording to disk",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: INFO)",
    )
    return parser

'''
usage: python scripts/main.py --preset presets/campaign.yaml --level 0 --duration 10 \
    --exp_name fusion --play_through --log_level DEBUG
'''
