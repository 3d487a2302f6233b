"""
Event types emitted by the fleet engine.

Events are immutable records of state changes. Uses discriminated union
pattern for type-safe event handling.

Design principles:
- All events are immutable (frozen dataclasses)
- Each event has a 'type' discriminator field
- Events include sequence numbers for ordering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Literal

from .models import SequenceNumber


# ─────────────────────────────────────────────────────────────────────────────
# Type alias for all events
# ─────────────────────────────────────────────────────────────────────────────

type FleetEvent = (
    LotCreated
    | LotDeleted
    | TruckPlaced
    | TruckRejected
    | TruckPromoted
    | TruckLoaded
    | TruckRecycled
    | TruckDiscarded
)


# ─────────────────────────────────────────────────────────────────────────────
# Lot Events
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class LotCreated:
    """Emitted when a new parking lot is registered."""
    type: Literal["lot_created"] = field(default="lot_created", init=False)
    capacity: int
    truck_limit: int
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "capacity": self.capacity,
            "truck_limit": self.truck_limit,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class LotDeleted:
    """Emitted when a lot is removed. Trucks still inside are discarded."""
    type: Literal["lot_deleted"] = field(default="lot_deleted", init=False)
    capacity: int
    discarded_truck_ids: tuple[int, ...]
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "capacity": self.capacity,
            "discarded_truck_ids": list(self.discarded_truck_ids),
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


# ─────────────────────────────────────────────────────────────────────────────
# Truck Events
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class TruckPlaced:
    """Emitted when a new truck enters a lot's waiting queue."""
    type: Literal["truck_placed"] = field(default="truck_placed", init=False)
    truck_id: int
    requested_capacity: int
    lot_capacity: int
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "truck_id": self.truck_id,
            "requested_capacity": self.requested_capacity,
            "lot_capacity": self.lot_capacity,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TruckRejected:
    """Emitted when no lot at or below the requested capacity has room."""
    type: Literal["truck_rejected"] = field(default="truck_rejected", init=False)
    truck_id: int
    requested_capacity: int
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "truck_id": self.truck_id,
            "requested_capacity": self.requested_capacity,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TruckPromoted:
    """Emitted when a waiting truck moves to its lot's ready queue."""
    type: Literal["truck_promoted"] = field(default="truck_promoted", init=False)
    truck_id: int
    lot_capacity: int
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "truck_id": self.truck_id,
            "lot_capacity": self.lot_capacity,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TruckLoaded:
    """Emitted when a ready truck takes a chunk of a load request."""
    type: Literal["truck_loaded"] = field(default="truck_loaded", init=False)
    truck_id: int
    lot_capacity: int
    chunk: int
    load: int            # Load after the chunk, before any reset
    max_capacity: int
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_full(self) -> bool:
        return self.load == self.max_capacity

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "truck_id": self.truck_id,
            "lot_capacity": self.lot_capacity,
            "chunk": self.chunk,
            "load": self.load,
            "max_capacity": self.max_capacity,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TruckRecycled:
    """Emitted when a loaded truck re-enters a waiting queue."""
    type: Literal["truck_recycled"] = field(default="truck_recycled", init=False)
    truck_id: int
    destination: int
    restarted: bool      # True if the truck was full and started a new cycle
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "truck_id": self.truck_id,
            "destination": self.destination,
            "restarted": self.restarted,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TruckDiscarded:
    """Emitted when a truck leaves the system because no lot can take it."""
    type: Literal["truck_discarded"] = field(default="truck_discarded", init=False)
    truck_id: int
    target_capacity: int
    sequence: SequenceNumber
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "truck_id": self.truck_id,
            "target_capacity": self.target_capacity,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
        }


# ─────────────────────────────────────────────────────────────────────────────
# Event Filtering
# ─────────────────────────────────────────────────────────────────────────────

def filter_events_for_truck(events: list[FleetEvent], truck_id: int) -> list[FleetEvent]:
    """Filter events to only those about a specific truck."""
    result = []
    for event in events:
        match event:
            case TruckPlaced(truck_id=tid) | TruckRejected(truck_id=tid) | \
                 TruckPromoted(truck_id=tid) | TruckLoaded(truck_id=tid) | \
                 TruckRecycled(truck_id=tid) | TruckDiscarded(truck_id=tid) if tid == truck_id:
                result.append(event)
            case LotDeleted(discarded_truck_ids=ids) if truck_id in ids:
                result.append(event)
    return result


def is_truck_event(event: FleetEvent) -> bool:
    """Check if an event describes a single truck."""
    match event:
        case LotCreated() | LotDeleted():
            return False
        case _:
            return True
