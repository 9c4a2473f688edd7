"""
Bubble Pulse launcher.

Usage:
    python -m bubble_pulse [--width 1280 --height 720] [--no-mic | --simulate-mic] [-v]
"""
import argparse
import logging

from .config import ASSETS_DIR, FPS, HEIGHT, WIDTH, SketchConfig


def _configure_logging(verbose):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Microphone-reactive ECG intro and floating music bubbles.")
    parser.add_argument("--width", type=int, default=WIDTH, help="Window width.")
    parser.add_argument("--height", type=int, default=HEIGHT, help="Window height.")
    parser.add_argument("--fps", type=int, default=FPS, help="Frame rate.")
    parser.add_argument("--fullscreen", action="store_true", help="Start fullscreen.")
    mic = parser.add_mutually_exclusive_group()
    mic.add_argument("--no-mic", action="store_true", help="Never open the microphone.")
    mic.add_argument("--simulate-mic", action="store_true", help="Use a synthetic loudness source.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible scene.")
    parser.add_argument("--assets", default=ASSETS_DIR, help="Directory holding the avatar images.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def config_from_args(args):
    return SketchConfig(
        width=args.width,
        height=args.height,
        fps=args.fps,
        fullscreen=args.fullscreen,
        enable_mic=not args.no_mic,
        simulate_mic=args.simulate_mic,
        seed=args.seed,
        assets_dir=args.assets,
        verbose=args.verbose,
    )


def main(argv=None):
    args = parse_args(argv)
    _configure_logging(args.verbose)
    from .app import BubblePulseApp

    BubblePulseApp(config_from_args(args)).run()


if __name__ == "__main__":
    main()
