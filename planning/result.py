"""Result of planning one order."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from models.errors import PlanningError
from models.plan import ProductionPlan
from models.slab import Slab


@dataclass
class PartOutcome:
    """
    Planning outcome for one input part.

    Attributes:
        part_id: Part identifier (None if the record had no id)
        success: True if a plan was built and stored
        plan: The stored plan on success
        error_code: PlanningError code on failure
        message: Human-readable failure reason
    """
    part_id: Optional[str]
    success: bool
    plan: Optional[ProductionPlan] = None
    error_code: Optional[str] = None
    message: str = ""

    @classmethod
    def failed(cls, part_id: Optional[str], error: PlanningError) -> 'PartOutcome':
        return cls(part_id=part_id, success=False, error_code=error.code, message=error.message)

    def to_dict(self) -> Dict:
        return {
            "partId": self.part_id,
            "success": self.success,
            "errorCode": self.error_code,
            "message": self.message
        }


@dataclass
class OrderPlanResult:
    """
    Plans generated for an order: which parts went onto which slabs, and
    which parts need manual handling.

    Attributes:
        order_id: The planned order
        slabs: All slabs, grouped by material in first-seen order
        outcomes: One outcome per input part, in input order
        metrics: Computed metrics (populated by compute_metrics)
    """
    order_id: str
    slabs: List[Slab] = field(default_factory=list)
    outcomes: List[PartOutcome] = field(default_factory=list)
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def plans(self) -> List[ProductionPlan]:
        return [o.plan for o in self.outcomes if o.success and o.plan is not None]

    @property
    def failures(self) -> List[PartOutcome]:
        return [o for o in self.outcomes if not o.success]

    def all_succeeded(self) -> bool:
        return not self.failures

    def get_total_waste(self) -> float:
        """Sum of waste across all slabs, in mm²."""
        return sum(slab.waste() for slab in self.slabs)

    def get_total_part_area(self) -> float:
        """Sum of placed part area across all slabs, in mm²."""
        return sum(slab.part_area() for slab in self.slabs)

    def get_average_utilization(self) -> float:
        if not self.slabs:
            return 0.0
        total = sum(slab.width * slab.height for slab in self.slabs)
        return self.get_total_part_area() / total

    def get_total_cnc_minutes(self) -> float:
        return sum(plan.cnc_plan.estimated_minutes for plan in self.plans)

    def num_slabs(self) -> int:
        """Total number of slabs used."""
        return len(self.slabs)

    def is_valid(self) -> bool:
        """
        Check the nesting invariants.

        Validates:
        1. Placements stay inside each slab's usable area
        2. No two reserved rectangles on a slab overlap
        3. Cut sequences on each slab are 1..n without gaps
        4. Every successfully planned part is placed exactly once
        """
        placed: Set[str] = set()
        for slab in self.slabs:
            low_x = low_y = slab.margin
            high_x = slab.width - slab.margin
            high_y = slab.height - slab.margin
            placements = slab.placements

            for p in placements:
                if (p.x < low_x - 1e-9 or p.y < low_y - 1e-9 or
                        p.x + p.reserved_width > high_x + 1e-9 or
                        p.y + p.reserved_height > high_y + 1e-9):
                    return False

            for i, a in enumerate(placements):
                for b in placements[i + 1:]:
                    if a.overlaps(b):
                        return False

            if sorted(p.sequence for p in placements) != list(range(1, len(placements) + 1)):
                return False

            for p in placements:
                if p.part_id in placed:
                    return False
                placed.add(p.part_id)

        planned = {o.part_id for o in self.outcomes if o.success}
        return planned == placed

    def compute_metrics(self) -> Dict[str, float]:
        """Compute and store all metrics."""
        self.metrics = {
            'num_slabs': self.num_slabs(),
            'num_planned': len(self.plans),
            'num_failed': len(self.failures),
            'total_part_area': self.get_total_part_area(),
            'total_waste': self.get_total_waste(),
            'avg_utilization': self.get_average_utilization(),
            'total_cnc_minutes': self.get_total_cnc_minutes(),
            'is_valid': float(self.is_valid())
        }
        return self.metrics

    def summary(self) -> str:
        """Generate a summary string of the result."""
        self.compute_metrics()
        lines = [
            "=" * 50,
            f"PRODUCTION PLAN SUMMARY - ORDER {self.order_id}",
            "=" * 50,
            f"Parts planned: {self.metrics['num_planned']}",
            f"Parts failed: {self.metrics['num_failed']}",
            f"Slabs used: {self.metrics['num_slabs']}",
            f"Total part area: {self.metrics['total_part_area'] / 1e6:.4f} m²",
            f"Total waste: {self.metrics['total_waste'] / 1e6:.4f} m²",
            f"Average utilization: {self.metrics['avg_utilization'] * 100:.1f}%",
            f"Total CNC time: {self.metrics['total_cnc_minutes']:.1f} min",
            f"Valid nesting: {bool(self.metrics['is_valid'])}",
            "=" * 50
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"OrderPlanResult(order={self.order_id}, slabs={self.num_slabs()}, "
                f"planned={len(self.plans)}, failed={len(self.failures)})")
