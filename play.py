"""
Play the ATC terminal game
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import numpy as np

from simulation.config import GameConfig, create_default_config, load_config, validate_config
from simulation.exceptions import AtcError
from simulation.game import Game
from simulation.game_map import load_map
from simulation.interface import UI
from simulation.state import create_state
from ui.terminal import TerminalUI
from utils.logger import configure_logging
from utils.recorder import SessionRecorder


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/game_config.yaml"


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Guide aircraft to their airports and exits")
    parser.add_argument("--config", type=str, default=None,
                        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH} if present)")
    parser.add_argument("--map", type=str, default=None,
                        help="Map name, loaded from <maps-dir>/<map>.yaml")
    parser.add_argument("--maps-dir", type=str, default=None,
                        help="Directory holding map files")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for aircraft spawning")
    parser.add_argument("--tick-rate", type=float, default=None,
                        help="Seconds per tick (overrides the map)")
    parser.add_argument("--spawn-rate", type=int, default=None,
                        help="Baseline ticks between spawns (overrides the map)")
    parser.add_argument("--record", type=str, default=None,
                        help="Write a JSONL recording of the session to this path")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Log file path")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Log level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)


def build_config(args) -> GameConfig:
    """Load the config file and apply command-line overrides"""
    if args.config is not None:
        config = load_config(args.config)
    elif Path(DEFAULT_CONFIG_PATH).exists():
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = create_default_config()

    overrides = {
        "map_name": args.map,
        "maps_dir": args.maps_dir,
        "seed": args.seed,
        "tick_rate": args.tick_rate,
        "spawn_rate": args.spawn_rate,
        "record_path": args.record,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    if args.log_file is not None:
        config.logging_config.file = args.log_file
    if args.log_level is not None:
        config.logging_config.level = args.log_level

    validate_config(config)
    return config


def run_session(config: GameConfig, ui: UI) -> int:
    """Play one session; returns the process exit status"""
    game_map = load_map(config.map_name, config.maps_dir)
    state = create_state(
        game_map,
        now=time.monotonic(),
        tick_rate=config.tick_rate,
        spawn_rate=config.spawn_rate,
    )
    game = Game(
        state,
        ui=ui,
        rng=np.random.default_rng(config.seed),
        max_turn_step=config.max_turn_step,
    )

    recorder = None
    if config.record_path:
        recorder = SessionRecorder(config.record_path)
        recorder.start(state)
        game.add_observer(recorder.record_tick)

    try:
        game.run()
    except Exception as e:
        logger.exception("Session aborted")
        ui.close(e)
        return 1
    finally:
        if recorder is not None:
            recorder.finish(state)

    ui.close()
    logger.info(f"Session metrics: {state.metrics.to_dict()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = build_config(args)
    except AtcError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.logging_config.level, config.logging_config.file)

    try:
        return run_session(config, TerminalUI())
    except AtcError as e:
        logger.error(f"Could not start session: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
