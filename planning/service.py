"""Planning service: generates, stores and advances production plans."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from models.errors import PlanningError, SlabNotFoundError, ValidationError
from models.ids import IDGenerator, UUIDGenerator
from models.part import PartDescriptor
from models.plan import ProductionPlan
from models.station import Station
from nesting.base import NestingEngine
from nesting.guillotine import GuillotineNestingEngine
from .builder import ProductionPlanBuilder
from .config import PlannerConfig
from .repository import InMemoryProductionPlanRepository, ProductionPlanRepository
from .result import OrderPlanResult, PartOutcome

logger = logging.getLogger(__name__)

PartInput = Union[PartDescriptor, Mapping[str, Any]]


@dataclass(frozen=True)
class SlabViewPart:
    part_id: str
    x: float
    y: float
    width: float
    height: float
    cut_sequence: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partId": self.part_id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "cutSequence": self.cut_sequence
        }


@dataclass(frozen=True)
class SlabView:
    """Wall-saw view of one slab, parts in cut order."""
    slab_id: str
    material: str
    width: float
    height: float
    parts: List[SlabViewPart] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slabId": self.slab_id,
            "material": self.material,
            "width": self.width,
            "height": self.height,
            "parts": [part.to_dict() for part in self.parts]
        }


class ProductionPlanningService:
    """
    Entry point for the order workflow.

    Args:
        repository: Plan storage (in-memory by default)
        config: Shop constants
        builder: Plan builder (built from config by default)
        id_generator: Slab ids for nesting runs
    """

    def __init__(self,
                 repository: Optional[ProductionPlanRepository] = None,
                 config: Optional[PlannerConfig] = None,
                 builder: Optional[ProductionPlanBuilder] = None,
                 id_generator: Optional[IDGenerator] = None):
        self.repository = repository if repository is not None else InMemoryProductionPlanRepository()
        self.config = config or PlannerConfig()
        self.id_generator = id_generator or UUIDGenerator()
        self.builder = builder or ProductionPlanBuilder(self.config, id_generator=self.id_generator)
        self._advance_lock = threading.Lock()

    def engine_for_material(self, material: str) -> NestingEngine:
        """Nesting engine sized for the material's slabs."""
        width, height = self.config.get_slab_size_for_material(material)
        return GuillotineNestingEngine(
            slab_width=width,
            slab_height=height,
            margin=self.config.margin,
            kerf=self.config.kerf,
            id_generator=self.id_generator
        )

    def generate_for_order(self, order_id: str, parts: Sequence[PartInput]) -> OrderPlanResult:
        """
        Nest, plan and store every part of an order.

        Parts are grouped by material and nested per group. Invalid or
        oversized parts are reported in the result and the rest are planned.

        Args:
            order_id: Order identifier
            parts: PartDescriptors or upstream part records

        Returns:
            OrderPlanResult with one outcome per input part, in input order
        """
        result = OrderPlanResult(order_id=order_id)
        outcomes: List[Optional[PartOutcome]] = [None] * len(parts)
        groups: Dict[str, List[int]] = {}
        descriptors: Dict[int, PartDescriptor] = {}
        seen_ids = set()

        # Step 1: Validate and group by material
        for index, raw in enumerate(parts):
            part_id = _raw_part_id(raw)
            try:
                part = self._to_descriptor(raw, order_id)
                if part.id in seen_ids:
                    raise ValidationError(f"Duplicate part id {part.id!r} in order {order_id}",
                                          part_id=part.id, field="id")
            except ValidationError as exc:
                logger.warning("Rejected part %s: %s", part_id, exc.message)
                outcomes[index] = PartOutcome.failed(part_id, exc)
                continue
            seen_ids.add(part.id)
            descriptors[index] = part
            groups.setdefault(part.material, []).append(index)

        # Step 2: Nest each material group and build plans
        for material, indices in groups.items():
            engine = self.engine_for_material(material)
            nestable = []
            for index in indices:
                try:
                    engine.check_fits(descriptors[index])
                except PlanningError as exc:
                    logger.warning("Rejected part %s: %s", descriptors[index].id, exc.message)
                    outcomes[index] = PartOutcome.failed(descriptors[index].id, exc)
                    continue
                nestable.append(index)

            if not nestable:
                continue

            slabs = engine.pack([descriptors[index] for index in nestable])
            result.slabs.extend(slabs)

            index_by_part = {descriptors[index].id: index for index in nestable}
            for slab in slabs:
                for placement in sorted(slab.placements, key=lambda p: p.sequence):
                    plan = self.builder.build(placement.part, order_id, placement, slab)
                    self.repository.save(plan)
                    outcomes[index_by_part[placement.part_id]] = PartOutcome(
                        part_id=placement.part_id, success=True, plan=plan
                    )

        result.outcomes = [o for o in outcomes if o is not None]
        result.compute_metrics()
        logger.info("Order %s: %d plans on %d slab(s), %d part(s) rejected",
                    order_id, len(result.plans), result.num_slabs(), len(result.failures))
        return result

    def get_or_create_plan(self, part: PartInput, order_id: Optional[str] = None) -> ProductionPlan:
        """
        Return the stored plan of a part, building a stand-alone one if none exists.

        Raises:
            ValidationError: if a new plan is needed and the part is invalid
        """
        part_id = _raw_part_id(part)
        if part_id is not None:
            existing = self.repository.find(part_id)
            if existing is not None:
                return existing

        descriptor = self._to_descriptor(part, order_id)
        plan = self.builder.build(descriptor, order_id)
        self.repository.save(plan)
        logger.info("Created stand-alone plan for part %s", descriptor.id)
        return plan

    def get_plan(self, part_id: str) -> ProductionPlan:
        return self.repository.get(part_id)

    def get_plans_for_order(self, order_id: str) -> List[ProductionPlan]:
        return self.repository.list_by_order(order_id)

    def slab_view(self, slab_id: str) -> SlabView:
        """
        Wall-saw view of a slab, derived from the stored plans.

        Raises:
            SlabNotFoundError: if no stored plan references the slab
        """
        plans = self.repository.list_by_slab(slab_id)
        if not plans:
            raise SlabNotFoundError(f"Slab {slab_id!r} not found", slab_id=slab_id)

        first = plans[0].wall_saw_plan
        parts = sorted(
            (SlabViewPart(
                part_id=plan.part_id,
                x=plan.wall_saw_plan.position_x,
                y=plan.wall_saw_plan.position_y,
                width=plan.wall_saw_plan.part_width,
                height=plan.wall_saw_plan.part_height,
                cut_sequence=plan.wall_saw_plan.cut_sequence
            ) for plan in plans),
            key=lambda part: part.cut_sequence
        )
        return SlabView(
            slab_id=slab_id,
            material=first.slab_material,
            width=first.slab_width,
            height=first.slab_height,
            parts=parts
        )

    def advance_station(self, part_id: str, station: Union[Station, str]) -> ProductionPlan:
        """
        Record that a part reached a station.

        Raises:
            PlanNotFoundError: if the part has no plan
            OutOfOrderStationError: if the station is not the next one; the
                stored plan is unchanged
        """
        with self._advance_lock:
            plan = self.repository.get(part_id)
            plan.advance_to(station)
            self.repository.save(plan)
        logger.info("Part %s advanced to %s (%s)", part_id, plan.current_station.value, plan.status.value)
        return plan

    def _to_descriptor(self, raw: PartInput, order_id: Optional[str]) -> PartDescriptor:
        if isinstance(raw, PartDescriptor):
            return raw
        record = dict(raw)
        if not record.get("material"):
            record["material"] = self.config.default_material
        return PartDescriptor.from_dict(record, order_id=order_id)

    def __repr__(self) -> str:
        return f"ProductionPlanningService(repository={self.repository.__class__.__name__})"


def _raw_part_id(raw: PartInput) -> Optional[str]:
    if isinstance(raw, PartDescriptor):
        return raw.id
    part_id = raw.get("id")
    return str(part_id) if part_id not in (None, "") else None
