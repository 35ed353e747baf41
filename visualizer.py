"""Console reports for planned orders."""

from collections import defaultdict
from typing import Dict, List, Optional

from models.plan import ProductionPlan
from models.station import STATION_ORDER
from planning.result import OrderPlanResult


class PlanVisualizer:
    """Text reports showing slab layouts, part plans and station progress."""

    def __init__(self, result: OrderPlanResult):
        self.result = result

    def get_material_slab_distribution(self) -> Dict[str, List[str]]:
        """Get which slabs were cut for each material."""
        distribution = defaultdict(list)
        for slab in self.result.slabs:
            distribution[slab.material].append(slab.id)
        return dict(distribution)

    def print_slab_summary(self):
        """Print summary of all slabs."""
        print("\n" + "=" * 70)
        print("SLAB SUMMARY")
        print("=" * 70)
        print(f"Total slabs: {self.result.num_slabs()}")
        print(f"Total waste: {self.result.get_total_waste() / 1e6:.4f} m2")
        print(f"Average utilization: {self.result.get_average_utilization() * 100:.2f}%")
        print("=" * 70)

    def print_slabs_detail(self, max_slabs: Optional[int] = None):
        """Print detailed view of each slab with its cut list."""
        slabs = self.result.slabs
        if max_slabs:
            slabs = slabs[:max_slabs]

        print("\n" + "=" * 70)
        print("SLAB DETAILS")
        print("=" * 70)

        for slab in slabs:
            print(f"\n+{'-' * 68}+")
            print(f"| {slab.id:<66} |")
            print(f"+{'-' * 68}+")
            header = f"Material: {slab.material}   Size: {slab.width:g} x {slab.height:g} mm"
            print(f"| {header:<66} |")
            stats = f"Parts: {slab.num_parts():<6} Utilization: {slab.utilization() * 100:>6.2f}%"
            print(f"| {stats:<66} |")
            print(f"+{'-' * 68}+")
            print(f"| {'CUT LIST:':<66} |")

            for placement in sorted(slab.placements, key=lambda p: p.sequence):
                rotated = " (R)" if placement.rotated else ""
                line = (f"  {placement.sequence:>3}. {placement.part_id:<16} "
                        f"{placement.width:g} x {placement.height:g} @ ({placement.x:g}, {placement.y:g}){rotated}")
                print(f"| {line:<66} |")

            print(f"+{'-' * 68}+")

        if max_slabs and len(self.result.slabs) > max_slabs:
            print(f"\n... and {len(self.result.slabs) - max_slabs} more slabs")

    def print_material_distribution(self):
        """Print which slabs were used per material."""
        distribution = self.get_material_slab_distribution()

        print("\n" + "=" * 70)
        print("MATERIAL DISTRIBUTION")
        print("=" * 70)
        print(f"{'Material':<25} {'Slabs':<8} {'Slab IDs'}")
        print("-" * 70)

        for material in sorted(distribution.keys()):
            slab_ids = distribution[material]
            slabs_str = ", ".join(slab_ids[:3])
            if len(slab_ids) > 3:
                slabs_str += f", ... (+{len(slab_ids) - 3} more)"
            print(f"{material:<25} {len(slab_ids):<8} {slabs_str}")

        print("-" * 70)

    def print_part_plans(self, max_parts: Optional[int] = None):
        """Print banding and CNC details per planned part."""
        plans = self.result.plans
        if max_parts:
            plans = plans[:max_parts]

        print("\n" + "=" * 70)
        print("PART PLANS")
        print("=" * 70)
        print(f"{'Part ID':<18} {'Slab seq':<9} {'CNC min':<9} {'Tools':<6} {'Banding'}")
        print("-" * 70)

        for plan in plans:
            banding = " > ".join(plan.banding_plan.sequence) or "-"
            print(f"{plan.part_id:<18} {plan.wall_saw_plan.cut_sequence:<9} "
                  f"{plan.cnc_plan.estimated_minutes:<9.1f} {len(plan.cnc_plan.tool_changes):<6} {banding}")

        print("-" * 70)
        print(f"{'Total CNC time:':<28} {self.result.get_total_cnc_minutes():.1f} min")

    def print_failures(self):
        """Print parts that could not be planned."""
        failures = self.result.failures
        if not failures:
            return

        print("\n" + "=" * 70)
        print("PARTS NEEDING MANUAL HANDLING")
        print("=" * 70)
        for outcome in failures:
            print(f"  - {outcome.part_id or '<no id>'}: [{outcome.error_code}] {outcome.message}")

    def print_full_report(self, max_slabs_detail: int = 10):
        """Print a full report."""
        self.print_slab_summary()
        self.print_slabs_detail(max_slabs=max_slabs_detail)
        self.print_material_distribution()
        self.print_part_plans()
        self.print_failures()


def station_progress(plan: ProductionPlan) -> str:
    """One-line progress bar, e.g. ``[x] wallsaw  [>] cnc  [ ] banding ...``."""
    marks = []
    for station in STATION_ORDER:
        if station in plan.completed_stations or (plan.is_complete() and station == plan.current_station):
            mark = "x"
        elif station == plan.current_station:
            mark = ">"
        else:
            mark = " "
        marks.append(f"[{mark}] {station.value}")
    return "  ".join(marks)


def visualize_result(result: OrderPlanResult) -> PlanVisualizer:
    """Main function to print a planned order."""
    viz = PlanVisualizer(result)
    viz.print_full_report()
    return viz
