"""
Command dispatcher - the text front end of the fleet engine.

Parses one command per line, routes it to the engine and renders the
result as a single output line.

Design principles:
- Unknown commands are logged and skipped, never fatal
- Malformed numbers or missing fields raise ValueError and stop the run
- Output line endings are configurable; LEGACY reproduces the old byte layout
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Self

from .engine import FleetEngine, LoadResult
from .key_index import NOT_FOUND
from .models import Promotion


logger = logging.getLogger(__name__)

_INT_FIELD = re.compile(r"[+-]?[0-9]+")


# ─────────────────────────────────────────────────────────────────────────────
# Enumerations
# ─────────────────────────────────────────────────────────────────────────────

class CommandType(Enum):
    """Command words understood by the dispatcher."""
    CREATE_PARKING_LOT = "create_parking_lot"
    DELETE_PARKING_LOT = "delete_parking_lot"
    ADD_TRUCK = "add_truck"
    READY = "ready"
    LOAD = "load"
    COUNT = "count"

    @property
    def arity(self) -> int:
        """Number of integer fields the command takes."""
        if self in (CommandType.CREATE_PARKING_LOT, CommandType.ADD_TRUCK, CommandType.LOAD):
            return 2
        return 1


class LineEnding(Enum):
    """Output line terminator policy."""
    LF = "lf"
    CRLF = "crlf"
    LEGACY = "legacy"    # \r\n everywhere except after 'ready'

    def terminator(self, command_type: CommandType) -> str:
        if self == LineEnding.LF:
            return "\n"
        if self == LineEnding.CRLF:
            return "\r\n"
        return "\n" if command_type == CommandType.READY else "\r\n"


# ─────────────────────────────────────────────────────────────────────────────
# Command
# ─────────────────────────────────────────────────────────────────────────────

def _parse_int(field: str) -> int:
    """Parse an optionally signed run of ASCII digits."""
    if not _INT_FIELD.fullmatch(field):
        raise ValueError(f"invalid integer field: {field!r}")
    return int(field)


@dataclass(frozen=True, slots=True)
class Command:
    """A parsed command line."""
    type: CommandType
    args: tuple[int, ...]

    @classmethod
    def parse(cls, line: str) -> Self | None:
        """
        Parse a space-separated command line.

        Returns None for a blank line or an unknown command word.
        Raises ValueError if fields are missing or not plain decimal integers.
        Extra trailing fields are ignored.
        """
        parts = line.split()
        if not parts:
            return None

        try:
            command_type = CommandType(parts[0])
        except ValueError:
            return None

        fields = parts[1:1 + command_type.arity]
        if len(fields) < command_type.arity:
            raise ValueError(
                f"{command_type.value} expects {command_type.arity} fields, got {len(fields)}"
            )

        return cls(type=command_type, args=tuple(_parse_int(f) for f in fields))

    def __str__(self) -> str:
        return " ".join([self.type.value, *(str(a) for a in self.args)])


# ─────────────────────────────────────────────────────────────────────────────
# Formatting
# ─────────────────────────────────────────────────────────────────────────────

def format_promotion(promotion: Promotion | None) -> str:
    """Render a promotion as '<truck id> <lot>' or '-1'."""
    if promotion is None:
        return str(NOT_FOUND)
    return f"{promotion.truck_id} {promotion.lot_capacity}"


def format_load_result(result: LoadResult) -> str:
    """Render assignments as '<id> <dest> - <id> <dest>' or '-1'."""
    if not result.serviced:
        return str(NOT_FOUND)
    return " - ".join(f"{a.truck_id} {a.destination}" for a in result.assignments)


# ─────────────────────────────────────────────────────────────────────────────
# Dispatcher
# ─────────────────────────────────────────────────────────────────────────────

class CommandDispatcher:
    """
    Routes parsed commands to a FleetEngine and formats the results.

    Keeps per-command counters for the end-of-run summary.
    """

    def __init__(
        self,
        engine: FleetEngine | None = None,
        line_ending: LineEnding | str = LineEnding.LF,
    ):
        self.engine = engine or FleetEngine()
        self.line_ending = self._normalize_line_ending(line_ending)
        self.stats: dict[str, int] = defaultdict(int)

    def _normalize_line_ending(self, line_ending: LineEnding | str) -> LineEnding:
        """Normalize line_ending to LineEnding enum."""
        if isinstance(line_ending, LineEnding):
            return line_ending
        return LineEnding(line_ending.lower())

    def execute(self, command: Command) -> str | None:
        """Run one command. Returns its output line (unterminated) or None."""
        self.stats[command.type.value] += 1
        args = command.args

        match command.type:
            case CommandType.CREATE_PARKING_LOT:
                self.engine.create_lot(args[0], args[1])
                return None
            case CommandType.DELETE_PARKING_LOT:
                self.engine.delete_lot(args[0])
                return None
            case CommandType.ADD_TRUCK:
                return str(self.engine.place_truck(args[0], args[1]))
            case CommandType.READY:
                return format_promotion(self.engine.promote_truck(args[0]))
            case CommandType.LOAD:
                return format_load_result(self.engine.distribute_load(args[0], args[1]))
            case CommandType.COUNT:
                return str(self.engine.count_trucks(args[0]))

    def _skip(self, line: str) -> None:
        """Log an unknown command. Blank lines are skipped silently."""
        parts = line.split()
        if parts:
            self.stats["unknown"] += 1
            logger.warning("Unknown command: %s", parts[0])

    def execute_line(self, line: str) -> str | None:
        """Parse and run one line. Unknown commands are logged and skipped."""
        command = Command.parse(line)
        if command is None:
            self._skip(line)
            return None
        return self.execute(command)

    def run(self, lines: Iterable[str]) -> Iterator[str]:
        """
        Run every line in order, yielding terminated output lines.

        A malformed line raises ValueError naming its line number; output
        already yielded stays valid.
        """
        for line_no, line in enumerate(lines, start=1):
            try:
                command = Command.parse(line)
                if command is None:
                    self._skip(line)
                    continue
                output = self.execute(command)
            except ValueError as e:
                raise ValueError(f"line {line_no}: {e}") from e

            if output is not None:
                yield output + self.line_ending.terminator(command.type)

    def __repr__(self) -> str:
        return f"CommandDispatcher(engine={self.engine!r}, line_ending={self.line_ending.value})"
