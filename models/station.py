"""Station and plan status definitions."""

from enum import Enum
from typing import Optional


class Station(str, Enum):
    """
    Production stations a part passes through, in order.

    COMPLETE is the pseudo-station reached after packaging.
    """
    WALLSAW = "wallsaw"
    CNC = "cnc"
    BANDING = "banding"
    PACKAGING = "packaging"
    COMPLETE = "complete"

    @property
    def order_index(self) -> int:
        """Position in sequence: wallsaw=0 ... complete=4."""
        return STATION_ORDER.index(self)

    def next(self) -> Optional['Station']:
        """The station that follows this one, None after COMPLETE."""
        index = self.order_index + 1
        return STATION_ORDER[index] if index < len(STATION_ORDER) else None


class PlanStatus(str, Enum):
    """Lifecycle states of a production plan."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


STATION_ORDER = (
    Station.WALLSAW,
    Station.CNC,
    Station.BANDING,
    Station.PACKAGING,
    Station.COMPLETE,
)
