#!/usr/bin/env python3
"""
CLI for reducing and recording file event traces.

Usage:
    python -m src.cli reduce events.txt
    python -m src.cli reduce --format json < events.txt
    python -m src.cli record ./folder --output events.txt --duration 30
"""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

from src.reducer import (
    EventRecorder,
    EventReducer,
    ReducerConfig,
    ReducerError,
    format_history,
    format_trace,
    read_trace,
    to_json,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cli")


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self):
        self.should_exit = False
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True


def build_config(args) -> ReducerConfig:
    """Environment settings first, then explicit flags."""
    config = ReducerConfig.from_env()
    if getattr(args, "strict", False):
        config.strict_index = True
    if getattr(args, "no_copies", False):
        config.detect_copies = False
    if getattr(args, "no_folder_moves", False):
        config.detect_folder_moves = False
    if getattr(args, "no_collapse", False):
        config.collapse_folder_deletes = False
    return config


def cmd_reduce(args):
    """Reduce a primitive event trace to a readable history."""
    config = build_config(args)

    try:
        if args.input and args.input != "-":
            input_path = Path(args.input)
            if not input_path.exists():
                logger.error(f"Trace file not found: {input_path}")
                sys.exit(1)
            events = read_trace(input_path, config)
        else:
            events = read_trace(sys.stdin, config)

        reducer = EventReducer(config)
        reducer.ingest_all(events)
        reduced = reducer.finish().events()
    except ReducerError as e:
        logger.error(f"Cannot reduce trace: {e}")
        sys.exit(1)

    if args.format == "json":
        print(to_json(reduced, sep=config.separator))
    else:
        for line in format_history(reduced, config.separator):
            print(line)


def cmd_record(args):
    """Record a primitive event trace from a live directory."""
    config = build_config(args)

    root = Path(args.root).resolve()
    if not root.exists():
        logger.error(f"Root path does not exist: {root}")
        sys.exit(1)
    if not root.is_dir():
        logger.error(f"Root path is not a directory: {root}")
        sys.exit(1)

    shutdown = GracefulShutdown()
    deadline = time.monotonic() + args.duration if args.duration else None

    with EventRecorder(root, config) as recorder:
        logger.info("Press Ctrl+C to stop")
        while not shutdown.should_exit:
            if deadline is not None and time.monotonic() >= deadline:
                break
            time.sleep(0.2)

    lines = format_trace(recorder.events(), config.separator)
    text = "\n".join(lines) + "\n"

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        logger.info(f"Wrote {len(lines) - 1} events to {output_path}")
    else:
        sys.stdout.write(text)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="CLI for reducing file event traces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the history of a trace
  python -m src.cli reduce events.txt

  # Same, as JSON, reading the trace from stdin
  python -m src.cli reduce --format json < events.txt

  # Record a trace of a folder for 30 seconds
  python -m src.cli record ./documents --output events.txt --duration 30
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Reduce command
    reduce_parser = subparsers.add_parser("reduce", help="Reduce a trace to a history")
    reduce_parser.add_argument("input", nargs="?", default="-", help="Trace file (default: stdin)")
    reduce_parser.add_argument("--format", default="text", choices=["text", "json"], help="Output format")
    reduce_parser.add_argument("--strict", action="store_true", help="Fail on deletes of unseen files")
    reduce_parser.add_argument("--no-copies", action="store_true", help="Disable copy detection")
    reduce_parser.add_argument("--no-folder-moves", action="store_true", help="Disable folder move detection")
    reduce_parser.add_argument("--no-collapse", action="store_true", help="Keep nested folder deletes separate")
    reduce_parser.set_defaults(func=cmd_reduce)

    # Record command
    record_parser = subparsers.add_parser("record", help="Record a trace of a directory")
    record_parser.add_argument("root", help="Directory to record")
    record_parser.add_argument("--output", default=None, help="Trace file to write (default: stdout)")
    record_parser.add_argument("--duration", type=float, default=None, help="Seconds to record (default: until Ctrl+C)")
    record_parser.set_defaults(func=cmd_record)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    args.func(args)


if __name__ == "__main__":
    main()
