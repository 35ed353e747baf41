"""Planning errors.

All planner errors derive from PlanningError so callers can report them
uniformly (per-part outcomes, CLI output, JSON documents).
"""

from typing import Any, Dict


class PlanningError(Exception):
    """
    Base exception for all planning errors.

    Attributes:
        code: Error code (INVALID_PART, PART_TOO_LARGE, ...)
        details: Additional context as keyword arguments
    """

    code = "PLANNING_ERROR"

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def as_dict(self) -> Dict[str, Any]:
        """Return error as dictionary for reports."""
        return {"code": self.code, "message": self.message, **self.details}


class ValidationError(PlanningError):
    """A part is missing a dimension or has a non-positive one."""

    code = "INVALID_PART"


class PartTooLargeForSlab(PlanningError):
    """A part does not fit the slab's usable area in any orientation."""

    code = "PART_TOO_LARGE"


class OutOfOrderStationError(PlanningError):
    """A station advance skips a station, regresses or targets a finished plan."""

    code = "OUT_OF_ORDER_STATION"


class PlanNotFoundError(PlanningError):
    code = "PLAN_NOT_FOUND"


class SlabNotFoundError(PlanningError):
    code = "SLAB_NOT_FOUND"
