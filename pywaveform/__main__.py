"""
pywaveform entry point.

Usage:
    python -m pywaveform
    python -m pywaveform --samples 20000 --seed 7
    python -m pywaveform --loglevel DEBUG --log-console
"""

import sys
import argparse
from pathlib import Path


def main(argv=None):
    """Main entry point for pywaveform."""
    parser = argparse.ArgumentParser(
        description="pywaveform - synchronized waveform viewer for analog, discrete and event data"
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=10_000,
        help="Number of samples in the demo recording (default: 10000)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the demo recording (default: random)"
    )
    parser.add_argument(
        "--refresh-ms",
        type=int,
        default=250,
        help="Frame refresh interval in milliseconds (default: 250)"
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Settings JSON file (default: ~/.config/pywaveform/settings.json)"
    )
    parser.add_argument(
        "-l", "--loglevel",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING). DEBUG writes to /tmp/pywaveform_debug.log"
    )
    parser.add_argument(
        "--logfile",
        default="/tmp/pywaveform_debug.log",
        help="Log file path (default: /tmp/pywaveform_debug.log)"
    )
    parser.add_argument(
        "--log-console",
        action="store_true",
        help="Also log to console (stderr)"
    )

    args = parser.parse_args(argv)
    if args.samples <= 0:
        parser.error("--samples must be positive")

    # Setup logging before importing anything else
    from .logging import setup_logging
    setup_logging(
        level=args.loglevel,
        log_file=args.logfile,
        console=args.log_console
    )

    # Import here to avoid slow startup for --help
    from .core.demo_data import build_demo_store
    from .core.settings import WaveformConfig
    from .gui.app import run_app

    config = WaveformConfig.from_settings(Path(args.settings) if args.settings else None)
    store, annotations = build_demo_store(samples=args.samples, seed=args.seed)
    sys.exit(run_app(store, annotations, config=config, refresh_ms=args.refresh_ms))


if __name__ == "__main__":
    main()
