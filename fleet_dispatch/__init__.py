"""
Fleet Dispatch - capacity-indexed matching of trucks to parking lots.

Trucks wait in capacity-keyed lots, are promoted to ready, take part of a
load request and are recycled into the lot that best fits their remaining
(or, once full, total) capacity.

Features:
- AVL-backed ordered key index with predecessor/successor queries
- Bounded lots with waiting and ready queues
- Nearest-capacity placement, promotion and load distribution
- Lazily cleaned eligibility hints
- Event-driven architecture
- Line-oriented command runner

Example usage:

    from fleet_dispatch import FleetEngine

    engine = FleetEngine(on_event=print)
    engine.create_lot(10, 2)
    engine.create_lot(5, 2)

    engine.place_truck(1, 10)       # -> 10
    engine.place_truck(2, 7)        # -> 5
    engine.promote_truck(10)        # -> Promotion(truck_id=1, lot_capacity=10)

    result = engine.distribute_load(10, 5)
    print(result.assignments)       # truck 1 recycled to lot 5
    print(engine.count_trucks(0))   # -> 2
"""

from .key_index import (
    NOT_FOUND,
    OrderedKeyIndex,
)

from .models import (
    SequenceNumber,
    Truck,
    Promotion,
    LoadAssignment,
)

from .parking_lot import (
    ParkingLot,
    LotState,
    FleetSnapshot,
)

from .events import (
    # Type alias
    FleetEvent,
    # Lot events
    LotCreated,
    LotDeleted,
    # Truck events
    TruckPlaced,
    TruckRejected,
    TruckPromoted,
    TruckLoaded,
    TruckRecycled,
    TruckDiscarded,
    # Utilities
    filter_events_for_truck,
    is_truck_event,
)

from .engine import (
    FleetEngine,
    LoadResult,
)

from .dispatcher import (
    Command,
    CommandType,
    CommandDispatcher,
    LineEnding,
    format_promotion,
    format_load_result,
)


__all__ = [
    # Index
    "NOT_FOUND",
    "OrderedKeyIndex",
    # Domain objects
    "SequenceNumber",
    "Truck",
    "Promotion",
    "LoadAssignment",
    # Lots
    "ParkingLot",
    "LotState",
    "FleetSnapshot",
    # Events
    "FleetEvent",
    "LotCreated",
    "LotDeleted",
    "TruckPlaced",
    "TruckRejected",
    "TruckPromoted",
    "TruckLoaded",
    "TruckRecycled",
    "TruckDiscarded",
    "filter_events_for_truck",
    "is_truck_event",
    # Engine
    "FleetEngine",
    "LoadResult",
    # Dispatcher
    "Command",
    "CommandType",
    "CommandDispatcher",
    "LineEnding",
    "format_promotion",
    "format_load_result",
]

__version__ = "0.1.0"
