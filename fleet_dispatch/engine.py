"""
Fleet engine: matches trucks to capacity-keyed parking lots.

Implements nearest-capacity matching with:
- Placement into the largest lot at or below a truck's capacity
- Promotion from the nearest lot at or above a requested capacity
- Load distribution across ready trucks in ascending lot order
- Recycling of loaded trucks back into waiting queues
- Comprehensive event emission

Design principles:
- Single-threaded, synchronous state machine, one command at a time
- One authoritative index of lots plus three hint indices
- Hints may hold stale keys; a query that visits one drops it
- All state changes emit events
- Sequence numbers for total ordering
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from sortedcontainers import SortedDict

from .key_index import NOT_FOUND, OrderedKeyIndex
from .models import LoadAssignment, Promotion, SequenceNumber, Truck
from .parking_lot import FleetSnapshot, LotState, ParkingLot
from .events import (
    FleetEvent, LotCreated, LotDeleted, TruckPlaced, TruckRejected,
    TruckPromoted, TruckLoaded, TruckRecycled, TruckDiscarded,
)


logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Load Result
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class LoadResult:
    """Result of distributing a load request across ready trucks."""
    requested: int
    assignments: list[LoadAssignment] = field(default_factory=list)
    remaining: int = 0

    @property
    def serviced(self) -> bool:
        return len(self.assignments) > 0

    @property
    def delivered(self) -> int:
        return self.requested - self.remaining

    @property
    def fully_delivered(self) -> bool:
        return self.serviced and self.remaining == 0

    @property
    def discarded_truck_ids(self) -> list[int]:
        return [a.truck_id for a in self.assignments if a.discarded]


# ─────────────────────────────────────────────────────────────────────────────
# Fleet Engine
# ─────────────────────────────────────────────────────────────────────────────

class FleetEngine:
    """
    Capacity-indexed matching engine for trucks and parking lots.

    Indices:
    - all_lots: every registered lot key (authoritative)
    - accepting: lots believed to have room for a waiting truck
    - has_waiting: lots believed to hold a waiting truck
    - has_ready: lots believed to hold a ready truck

    The three hint indices never miss a lot whose predicate holds, but
    may keep a key after the predicate stops holding.

    Not thread-safe: callers sharing an engine must serialize every
    top-level call.
    """

    def __init__(self, on_event: Callable[[FleetEvent], None] | None = None):
        self._lots: SortedDict[int, ParkingLot] = SortedDict()

        self.all_lots = OrderedKeyIndex()
        self.accepting = OrderedKeyIndex()
        self.has_waiting = OrderedKeyIndex()
        self.has_ready = OrderedKeyIndex()

        self._on_event = on_event or (lambda e: None)
        self._sequence: int = 0

    def _next_sequence(self) -> SequenceNumber:
        """Get next sequence number."""
        self._sequence += 1
        return SequenceNumber(self._sequence)

    def _emit(self, event: FleetEvent) -> None:
        self._on_event(event)

    def _drop_hint(self, index: OrderedKeyIndex, name: str, capacity: int) -> None:
        if index.delete(capacity):
            logger.debug("Dropped %s hint for lot %d", name, capacity)

    # ─────────────────────────────────────────────────────────────────────────
    # Lot Management
    # ─────────────────────────────────────────────────────────────────────────

    def create_lot(self, capacity: int, truck_limit: int) -> bool:
        """
        Register a lot. New lots are empty, hence accepting.

        Returns False (and changes nothing) if the capacity is taken.
        """
        if capacity in self._lots:
            return False

        lot = ParkingLot(capacity=capacity, truck_limit=truck_limit)
        self._lots[capacity] = lot
        self.all_lots.insert(capacity)
        self.accepting.insert(capacity)

        self._emit(LotCreated(
            capacity=capacity,
            truck_limit=truck_limit,
            sequence=self._next_sequence(),
        ))
        return True

    def delete_lot(self, capacity: int) -> bool:
        """
        Remove a lot and every index entry for it.

        Trucks still inside the lot are discarded, not migrated.
        """
        lot = self._lots.pop(capacity, None)
        if lot is None:
            return False

        self.all_lots.delete(capacity)
        self.accepting.delete(capacity)
        self.has_waiting.delete(capacity)
        self.has_ready.delete(capacity)

        discarded = lot.clear()
        if discarded:
            logger.info("Lot %d deleted with %d trucks inside", capacity, len(discarded))

        self._emit(LotDeleted(
            capacity=capacity,
            discarded_truck_ids=tuple(t.id for t in discarded),
            sequence=self._next_sequence(),
        ))
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Placement
    # ─────────────────────────────────────────────────────────────────────────

    def place_truck(self, truck_id: int, capacity: int) -> int:
        """
        Add a new truck to the best-matching lot's waiting queue.

        The best match is the largest lot key <= capacity with room.
        Returns that key, or NOT_FOUND if every candidate is full.
        """
        truck = Truck(id=truck_id, max_capacity=capacity)

        if capacity in self._lots:
            candidate = capacity
        else:
            candidate = self.accepting.predecessor(capacity)

        while candidate != NOT_FOUND:
            if self._lots[candidate].try_enqueue_waiting(truck):
                break
            candidate = self.all_lots.predecessor(candidate)

        if candidate == NOT_FOUND:
            self._emit(TruckRejected(
                truck_id=truck_id,
                requested_capacity=capacity,
                sequence=self._next_sequence(),
            ))
            return NOT_FOUND

        self.has_waiting.insert(candidate)
        self._emit(TruckPlaced(
            truck_id=truck_id,
            requested_capacity=capacity,
            lot_capacity=candidate,
            sequence=self._next_sequence(),
        ))
        return candidate

    # ─────────────────────────────────────────────────────────────────────────
    # Promotion
    # ─────────────────────────────────────────────────────────────────────────

    def promote_truck(self, capacity: int) -> Promotion | None:
        """
        Move one waiting truck to ready in the nearest lot >= capacity.

        Stale has_waiting keys met along the way are dropped.
        Returns None if no lot at or above capacity has a waiting truck.
        """
        if capacity in self._lots:
            candidate = capacity
        else:
            candidate = self.has_waiting.successor(capacity)

        truck = None
        while candidate != NOT_FOUND:
            lot = self._lots.get(candidate)
            truck = lot.promote_one_waiting() if lot is not None else None
            if truck is not None:
                break

            self._drop_hint(self.has_waiting, "waiting", candidate)
            candidate = self.has_waiting.successor(candidate)

        if truck is None:
            return None

        self.has_ready.insert(candidate)
        if not lot.waiting:
            self.has_waiting.delete(candidate)

        self._emit(TruckPromoted(
            truck_id=truck.id,
            lot_capacity=candidate,
            sequence=self._next_sequence(),
        ))
        return Promotion(truck_id=truck.id, lot_capacity=candidate)

    # ─────────────────────────────────────────────────────────────────────────
    # Load Distribution
    # ─────────────────────────────────────────────────────────────────────────

    def distribute_load(self, capacity: int, amount: int) -> LoadResult:
        """
        Spread a load over ready trucks in lots >= capacity, ascending.

        Each truck takes min(its remaining capacity, the outstanding
        amount, its lot's capacity key), then goes back to a waiting
        queue: from its full capacity if it filled up (load reset), or
        from its remaining capacity otherwise. A truck that fits nowhere
        is discarded and recorded with NOT_FOUND.
        """
        result = LoadResult(requested=amount, remaining=amount)

        if capacity in self.has_ready:
            candidate = capacity
        else:
            candidate = self.has_ready.successor(capacity)

        while amount > 0 and candidate != NOT_FOUND:
            lot = self._lots.get(candidate)
            if lot is None or not lot.ready:
                self._drop_hint(self.has_ready, "ready", candidate)
                candidate = self.has_ready.successor(candidate)
                continue

            while lot.ready and amount > 0:
                truck = lot.pop_ready()
                if not lot.ready:
                    self.has_ready.delete(candidate)

                chunk = truck.take_load(min(amount, candidate))
                amount -= chunk

                self._emit(TruckLoaded(
                    truck_id=truck.id,
                    lot_capacity=candidate,
                    chunk=chunk,
                    load=truck.load,
                    max_capacity=truck.max_capacity,
                    sequence=self._next_sequence(),
                ))

                result.assignments.append(self._recycle(truck, chunk))

            if not lot.ready:
                self.has_ready.delete(candidate)

            if amount > 0:
                candidate = self.has_ready.successor(candidate)

        result.remaining = amount
        return result

    def _recycle(self, truck: Truck, chunk: int) -> LoadAssignment:
        """Send a truck that just took load back to a waiting queue."""
        restarted = truck.is_full
        if restarted:
            truck.unload()
            target = truck.max_capacity
        else:
            target = truck.remaining_capacity

        destination = self._find_spare_lot(target)

        if destination == NOT_FOUND:
            self._emit(TruckDiscarded(
                truck_id=truck.id,
                target_capacity=target,
                sequence=self._next_sequence(),
            ))
            return LoadAssignment(truck_id=truck.id, destination=NOT_FOUND, chunk=chunk)

        self._lots[destination].try_enqueue_waiting(truck)
        self.has_waiting.insert(destination)

        self._emit(TruckRecycled(
            truck_id=truck.id,
            destination=destination,
            restarted=restarted,
            sequence=self._next_sequence(),
        ))
        return LoadAssignment(truck_id=truck.id, destination=destination, chunk=chunk)

    def _find_spare_lot(self, target: int) -> int:
        """Largest lot key <= target with spare room, or NOT_FOUND."""
        if target in self._lots:
            candidate = target
        else:
            candidate = self.all_lots.predecessor(target)

        while candidate != NOT_FOUND:
            if self._lots[candidate].has_spare:
                return candidate
            candidate = self.all_lots.predecessor(candidate)

        return NOT_FOUND

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def count_trucks(self, threshold: int) -> int:
        """Total trucks in lots with capacity strictly above threshold."""
        return sum(
            self._lots[capacity].occupancy
            for capacity in self.all_lots.range_from(threshold + 1)
        )

    def get_lot(self, capacity: int) -> LotState | None:
        """Get a snapshot of one lot."""
        lot = self._lots.get(capacity)
        return lot.to_state() if lot is not None else None

    def get_snapshot(self) -> FleetSnapshot:
        """Get immutable snapshot of every lot, ascending by capacity."""
        return FleetSnapshot(lots=tuple(lot.to_state() for lot in self._lots.values()))

    def has_lot(self, capacity: int) -> bool:
        return capacity in self._lots

    @property
    def lot_count(self) -> int:
        return len(self._lots)

    @property
    def truck_count(self) -> int:
        return sum(lot.occupancy for lot in self._lots.values())

    @property
    def sequence(self) -> int:
        return self._sequence

    def __repr__(self) -> str:
        return (
            f"FleetEngine(lots={self.lot_count}, trucks={self.truck_count}, "
            f"seq={self._sequence})"
        )
