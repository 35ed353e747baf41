"""Production plan builder: combines nesting, banding and G-code per part."""

from datetime import datetime, timezone
from typing import Callable, Optional

from banding.planner import EdgeBandingPlanner
from gcode.synthesizer import GCodeSynthesizer
from models.ids import IDGenerator, UUIDGenerator
from models.part import PartDescriptor
from models.plan import (
    BandingPlan,
    CNCPlan,
    OtherPart,
    PackagingPlan,
    ProductionPlan,
    WallSawPlan,
)
from models.slab import Placement, Slab
from .config import PlannerConfig


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProductionPlanBuilder:
    """
    Assembles the ProductionPlan of a single part.

    Args:
        config: Shop constants
        banding_planner: Edge banding policy
        synthesizer: G-code synthesizer
        id_generator: Slab ids for parts planned without a placement
        clock: Returns the generation time stored on the plan
    """

    def __init__(self,
                 config: Optional[PlannerConfig] = None,
                 banding_planner: Optional[EdgeBandingPlanner] = None,
                 synthesizer: Optional[GCodeSynthesizer] = None,
                 id_generator: Optional[IDGenerator] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.config = config or PlannerConfig()
        self.banding_planner = banding_planner or EdgeBandingPlanner()
        self.synthesizer = synthesizer or GCodeSynthesizer(self.config.machine)
        self.id_generator = id_generator or UUIDGenerator()
        self.clock = clock

    def build(self,
              part: PartDescriptor,
              order_id: Optional[str] = None,
              placement: Optional[Placement] = None,
              slab: Optional[Slab] = None) -> ProductionPlan:
        """
        Build the plan for a part.

        Args:
            part: The part to plan
            order_id: Order the part belongs to (falls back to part.order_id)
            placement: The part's placement from a nesting run
            slab: The slab holding the placement; required with a placement

        Returns:
            A pending ProductionPlan
        """
        if placement is not None and slab is None:
            raise ValueError("A placement needs the slab it belongs to")
        if placement is not None and placement.part_id != part.id:
            raise ValueError(f"Placement is for part {placement.part_id}, not {part.id}")
        order_id = order_id if order_id is not None else part.order_id

        return ProductionPlan(
            part_id=part.id,
            order_id=order_id,
            wall_saw_plan=self.build_wall_saw_plan(part, placement, slab),
            cnc_plan=self.build_cnc_plan(part),
            banding_plan=self.build_banding_plan(part),
            packaging_plan=self.build_packaging_plan(order_id),
            generated_at=self.clock().isoformat()
        )

    def build_wall_saw_plan(self,
                            part: PartDescriptor,
                            placement: Optional[Placement],
                            slab: Optional[Slab]) -> WallSawPlan:
        if placement is None:
            # Planned alone: fresh slab, part at the first usable corner
            width, height = self.config.get_slab_size_for_material(part.material)
            return WallSawPlan(
                slab_id=self.id_generator.new_id(),
                slab_material=part.material,
                slab_width=width,
                slab_height=height,
                position_x=self.config.margin,
                position_y=self.config.margin,
                part_width=part.width,
                part_height=part.height,
                cut_sequence=1
            )

        others = [
            OtherPart(
                part_id=other.part_id,
                name=other.part.name,
                x=other.x,
                y=other.y,
                width=other.width,
                height=other.height
            )
            for other in sorted(slab.placements, key=lambda p: p.sequence)
            if other.part_id != part.id
        ]
        return WallSawPlan(
            slab_id=slab.id,
            slab_material=slab.material,
            slab_width=slab.width,
            slab_height=slab.height,
            position_x=placement.x,
            position_y=placement.y,
            part_width=placement.width,
            part_height=placement.height,
            cut_sequence=placement.sequence,
            rotated=placement.rotated,
            other_parts=others
        )

    def build_cnc_plan(self, part: PartDescriptor) -> CNCPlan:
        program = self.synthesizer.synthesize(part)
        return CNCPlan(
            program_id=program.program_id,
            gcode=program.gcode,
            tool_changes=program.tools,
            estimated_minutes=program.estimated_minutes,
            drill_holes=list(part.drill_holes)
        )

    def build_banding_plan(self, part: PartDescriptor) -> BandingPlan:
        banding = self.banding_planner.plan_banding(part)
        return BandingPlan(
            sequence=banding.sequence,
            edges=banding.edges,
            material=self.config.banding_material,
            color=part.color or self.config.banding_color
        )

    def build_packaging_plan(self, order_id: Optional[str]) -> PackagingPlan:
        return PackagingPlan(
            package_group=order_id,
            protection_type=self.config.protection_type,
            label_position=self.config.label_position
        )

    def __repr__(self) -> str:
        return f"ProductionPlanBuilder(banding={self.banding_planner}, gcode={self.synthesizer})"
