"""Models package for the production planner."""

from .errors import (
    PlanningError,
    ValidationError,
    PartTooLargeForSlab,
    OutOfOrderStationError,
    PlanNotFoundError,
    SlabNotFoundError,
)
from .ids import IDGenerator, UUIDGenerator, SequentialIdGenerator
from .part import DrillHole, PartDescriptor
from .slab import FreeRectangle, Placement, Slab
from .station import Station, PlanStatus, STATION_ORDER
from .plan import (
    OtherPart,
    WallSawPlan,
    CNCPlan,
    EdgeBand,
    BandingPlan,
    PackagingPlan,
    ProductionPlan,
)
from .order import Order

__all__ = [
    'PlanningError', 'ValidationError', 'PartTooLargeForSlab', 'OutOfOrderStationError',
    'PlanNotFoundError', 'SlabNotFoundError',
    'IDGenerator', 'UUIDGenerator', 'SequentialIdGenerator',
    'DrillHole', 'PartDescriptor',
    'FreeRectangle', 'Placement', 'Slab',
    'Station', 'PlanStatus', 'STATION_ORDER',
    'OtherPart', 'WallSawPlan', 'CNCPlan', 'EdgeBand', 'BandingPlan', 'PackagingPlan',
    'ProductionPlan',
    'Order',
]
