"""
Command-line runner: reads commands from a file, writes results to another.

    fleet-dispatch input.txt output.txt
    python -m fleet_dispatch - < input.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path

from .config import ConfigLoader, get_config_loader
from .dispatcher import CommandDispatcher, LineEnding
from .engine import FleetEngine
from .events import FleetEvent


logger = logging.getLogger(__name__)


def _trace_event(event: FleetEvent) -> None:
    logger.debug("Event #%d: %s", event.sequence, event.to_dict())


def _resolve_log_level(name: str) -> int:
    """Map a level name such as "debug" to its numeric value."""
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ValueError(f"Unknown log level: {name}")
    return level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fleet Dispatch command runner")
    parser.add_argument("input", help="Command file to read ('-' for stdin)")
    parser.add_argument("output", nargs="?", help="File to write results to (default: stdout)")
    parser.add_argument("--config", help="Path to a dispatch JSON config file")
    parser.add_argument(
        "--line-ending",
        choices=[e.value for e in LineEnding],
        help="Output line terminator (overrides config)",
    )
    parser.add_argument("--log-level", help="Logging level (overrides config)")
    parser.add_argument("--trace", action="store_true", help="Log every engine event at DEBUG")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    loader = ConfigLoader(Path(args.config)) if args.config else get_config_loader()

    try:
        log_config = loader.get_logging_config()

        # Configure logging
        logging.basicConfig(
            level=_resolve_log_level(args.log_level or log_config.level),
            format=log_config.format,
        )

        line_ending = args.line_ending or loader.get_output_config().line_ending
        trace = args.trace or loader.get_engine_config().trace_events

        engine = FleetEngine(on_event=_trace_event if trace else None)
        dispatcher = CommandDispatcher(engine=engine, line_ending=line_ending)
    except ValueError as e:
        logger.error(f"Invalid settings: {e}")
        return 1

    with ExitStack() as stack:
        try:
            if args.input == "-":
                source = sys.stdin
            else:
                source = stack.enter_context(open(args.input, "r"))

            if args.output:
                sink = stack.enter_context(open(args.output, "w", newline=""))
            else:
                sink = sys.stdout
        except OSError as e:
            logger.error(f"Cannot open command files: {e}")
            return 1

        try:
            for output in dispatcher.run(source):
                sink.write(output)
        except ValueError as e:
            logger.error(f"Malformed input, aborting run: {e}")
            return 1
        finally:
            sink.flush()

    logger.info(
        f"Processed {sum(dispatcher.stats.values())} commands: {dict(dispatcher.stats)}"
    )
    logger.info(f"Final state: {engine!r}")
    return 0
