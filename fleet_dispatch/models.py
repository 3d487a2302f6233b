"""
Core domain models for the fleet dispatch engine.

Design principles:
- Trucks are mutable (load changes as they cycle), records are frozen
- Integer capacities throughout; NOT_FOUND (-1) marks "no such lot"
- Validation on construction, so a bad value never enters the engine
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

from .key_index import NOT_FOUND


# Type alias for sequence numbers
SequenceNumber = NewType('SequenceNumber', int)


# ─────────────────────────────────────────────────────────────────────────────
# Truck
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(slots=True)
class Truck:
    """
    A truck with a fixed capacity and a current load.

    Mutable field: load. A truck lives in exactly one lot queue at a time.
    """
    id: int
    max_capacity: int
    load: int = 0

    def __post_init__(self):
        if self.max_capacity < 0:
            raise ValueError("Truck capacity cannot be negative")
        if self.load < 0:
            raise ValueError("Truck load cannot be negative")
        if self.load > self.max_capacity:
            raise ValueError("Truck load cannot exceed its capacity")

    @property
    def remaining_capacity(self) -> int:
        return self.max_capacity - self.load

    @property
    def is_full(self) -> bool:
        return self.load == self.max_capacity

    def take_load(self, amount: int) -> int:
        """
        Add load to the truck.

        Returns the amount actually taken (capped at remaining capacity).
        """
        if amount < 0:
            raise ValueError("Load amount cannot be negative")

        taken = min(amount, self.remaining_capacity)
        self.load += taken
        return taken

    def unload(self) -> None:
        """Empty the truck so it can start a fresh cycle."""
        self.load = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "max_capacity": self.max_capacity,
            "load": self.load,
            "remaining_capacity": self.remaining_capacity,
        }

    def __repr__(self) -> str:
        return f"Truck({self.id}, {self.load}/{self.max_capacity})"


# ─────────────────────────────────────────────────────────────────────────────
# Operation Records
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Promotion:
    """A truck moved from waiting to ready in the given lot."""
    truck_id: int
    lot_capacity: int

    def to_dict(self) -> dict:
        return {"truck_id": self.truck_id, "lot_capacity": self.lot_capacity}


@dataclass(frozen=True, slots=True)
class LoadAssignment:
    """
    Where a truck went after receiving load.

    destination is the lot it now waits in, or NOT_FOUND if no lot had
    room and the truck left the system.
    """
    truck_id: int
    destination: int
    chunk: int = 0

    @property
    def discarded(self) -> bool:
        return self.destination == NOT_FOUND

    def to_dict(self) -> dict:
        return {
            "truck_id": self.truck_id,
            "destination": self.destination,
            "chunk": self.chunk,
            "discarded": self.discarded,
        }
