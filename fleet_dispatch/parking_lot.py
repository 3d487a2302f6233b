"""
Parking lot implementation with bounded occupancy.

Design principles:
- Two FIFO queues per lot: waiting (just arrived) and ready (can take load)
- O(1) append and popleft on both queues
- Occupancy limit covers both queues together
- Immutable snapshots for inspection
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from .models import Truck


@dataclass
class ParkingLot:
    """
    Lot holding trucks of a given capacity class.

    Invariant: len(waiting) + len(ready) <= truck_limit.
    """
    capacity: int
    truck_limit: int
    waiting: deque[Truck] = field(default_factory=deque)
    ready: deque[Truck] = field(default_factory=deque)

    def __post_init__(self):
        if self.capacity < 0:
            raise ValueError("Lot capacity cannot be negative")
        if self.truck_limit < 0:
            raise ValueError("Lot truck limit cannot be negative")

    @property
    def occupancy(self) -> int:
        return len(self.waiting) + len(self.ready)

    @property
    def waiting_count(self) -> int:
        return len(self.waiting)

    @property
    def ready_count(self) -> int:
        return len(self.ready)

    @property
    def has_spare(self) -> bool:
        return self.occupancy < self.truck_limit

    @property
    def is_empty(self) -> bool:
        return self.occupancy == 0

    def try_enqueue_waiting(self, truck: Truck) -> bool:
        """Add truck to back of the waiting queue. False if the lot is full."""
        if not self.has_spare:
            return False
        self.waiting.append(truck)
        return True

    def promote_one_waiting(self) -> Truck | None:
        """Move the front waiting truck to the back of the ready queue."""
        if not self.waiting:
            return None
        truck = self.waiting.popleft()
        self.ready.append(truck)
        return truck

    def pop_ready(self) -> Truck | None:
        """Remove and return the front ready truck."""
        if not self.ready:
            return None
        return self.ready.popleft()

    def clear(self) -> list[Truck]:
        """Remove every truck, waiting first. Returns the removed trucks."""
        trucks = [*self.waiting, *self.ready]
        self.waiting.clear()
        self.ready.clear()
        return trucks

    def to_state(self) -> LotState:
        return LotState(
            capacity=self.capacity,
            truck_limit=self.truck_limit,
            waiting=tuple(t.id for t in self.waiting),
            ready=tuple(t.id for t in self.ready),
        )

    def __repr__(self) -> str:
        return (
            f"ParkingLot(capacity={self.capacity}, "
            f"trucks={self.occupancy}/{self.truck_limit}, "
            f"waiting={self.waiting_count}, ready={self.ready_count})"
        )


@dataclass(frozen=True, slots=True)
class LotState:
    """
    Immutable snapshot of a single lot.

    Truck ids are listed front to back.
    """
    capacity: int
    truck_limit: int
    waiting: tuple[int, ...]
    ready: tuple[int, ...]

    @property
    def occupancy(self) -> int:
        return len(self.waiting) + len(self.ready)

    @property
    def has_spare(self) -> bool:
        return self.occupancy < self.truck_limit

    def to_dict(self) -> dict:
        return {
            "capacity": self.capacity,
            "truck_limit": self.truck_limit,
            "waiting": list(self.waiting),
            "ready": list(self.ready),
            "occupancy": self.occupancy,
        }


@dataclass(frozen=True, slots=True)
class FleetSnapshot:
    """Immutable snapshot of every lot, ascending by capacity."""
    lots: tuple[LotState, ...]

    @property
    def lot_count(self) -> int:
        return len(self.lots)

    @property
    def truck_count(self) -> int:
        return sum(lot.occupancy for lot in self.lots)

    @property
    def waiting_count(self) -> int:
        return sum(len(lot.waiting) for lot in self.lots)

    @property
    def ready_count(self) -> int:
        return sum(len(lot.ready) for lot in self.lots)

    def to_dict(self) -> dict:
        return {
            "lots": [lot.to_dict() for lot in self.lots],
            "lot_count": self.lot_count,
            "truck_count": self.truck_count,
        }
