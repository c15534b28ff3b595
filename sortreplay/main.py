"""
Command-line entry point.

Loads ``sortreplay.json`` (or ``--config``), applies command-line overrides,
sets up logging and opens the pygame viewer.
"""
import argparse
import logging
import sys

from .algorithms import ALGORITHMS
from .utils import load_config, setup_logging, validate_config


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sortreplay",
                                description="Watch a sorting algorithm work, one step at a time.")
    p.add_argument("-a", "--algorithm", choices=sorted(ALGORITHMS))
    p.add_argument("-n", "--size", type=int, dest="array_size", help="number of bars")
    p.add_argument("--min", type=int, dest="min_value", help="smallest value")
    p.add_argument("--max", type=int, dest="max_value", help="largest value")
    p.add_argument("-s", "--speed", type=float, dest="speed_ms", help="delay per step in ms")
    p.add_argument("--seed", type=int, help="seed for reproducible arrays")
    p.add_argument("-c", "--config", help="path to a JSON config file")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return p


def resolve_config(argv=None):
    """Defaults < config file < command line."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    for key in ("algorithm", "array_size", "min_value", "max_value", "speed_ms", "seed"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value
    if args.log_level:
        config["logging"]["level"] = args.log_level
    validate_config(config)
    return config


def main(argv=None) -> int:
    try:
        config = resolve_config(argv)
    except (OSError, ValueError) as e:
        # Logging is not set up yet.
        print(f"FATAL: {e}", file=sys.stderr)
        return 2

    setup_logging(config)
    log = logging.getLogger(__name__)
    log.info("--- sortreplay starting (%s, %d values) ---",
             config["algorithm"], config["array_size"])

    # pygame is only needed once we actually open a window.
    import pygame
    from .viewer import FrameClock, open_window, run
    from .visualizer import SortingVisualizer

    screen = open_window()
    clock = FrameClock()
    vis = SortingVisualizer(
        clock,
        algorithm=config["algorithm"],
        size=config["array_size"],
        min_value=config["min_value"],
        max_value=config["max_value"],
        speed_ms=config["speed_ms"],
        seed=config["seed"],
    )
    try:
        run(vis, clock, screen)
    finally:
        pygame.quit()
        log.info("--- sortreplay shutting down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
