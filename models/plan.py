"""Production plan model: one plan per part, four station sub-plans."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import OutOfOrderStationError
from .part import DrillHole
from .station import PlanStatus, Station

EDGES = ("top", "bottom", "left", "right")


@dataclass(frozen=True)
class OtherPart:
    """A co-placed part on the same slab, shown to the saw operator."""
    part_id: str
    name: str
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partId": self.part_id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OtherPart':
        return cls(
            part_id=data["partId"],
            name=data.get("name") or "",
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"])
        )


@dataclass(frozen=True)
class WallSawPlan:
    """
    Where the part sits on its slab and when it is cut.

    Attributes:
        slab_id: Slab the part is nested on
        slab_material: Material of the slab
        slab_width: Slab width in mm
        slab_height: Slab height in mm
        position_x: Left edge of the part on the slab
        position_y: Top edge of the part on the slab
        part_width: Part width as laid on the slab
        part_height: Part height as laid on the slab
        cut_sequence: 1-based cut order within the slab
        rotated: Part is turned by 90 degrees on the slab
        other_parts: Remaining parts on the same slab, in cut order
    """
    slab_id: str
    slab_material: str
    slab_width: float
    slab_height: float
    position_x: float
    position_y: float
    part_width: float
    part_height: float
    cut_sequence: int
    rotated: bool = False
    other_parts: List[OtherPart] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slabId": self.slab_id,
            "slabMaterial": self.slab_material,
            "slabWidth": self.slab_width,
            "slabHeight": self.slab_height,
            "positionX": self.position_x,
            "positionY": self.position_y,
            "partWidth": self.part_width,
            "partHeight": self.part_height,
            "cutSequence": self.cut_sequence,
            "rotated": self.rotated,
            "otherParts": [other.to_dict() for other in self.other_parts]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WallSawPlan':
        return cls(
            slab_id=data["slabId"],
            slab_material=data["slabMaterial"],
            slab_width=float(data["slabWidth"]),
            slab_height=float(data["slabHeight"]),
            position_x=float(data["positionX"]),
            position_y=float(data["positionY"]),
            part_width=float(data["partWidth"]),
            part_height=float(data["partHeight"]),
            cut_sequence=int(data["cutSequence"]),
            rotated=bool(data.get("rotated", False)),
            other_parts=[OtherPart.from_dict(o) for o in data.get("otherParts", [])]
        )


@dataclass(frozen=True)
class CNCPlan:
    """CNC program for the part: G-code, tools and time estimate."""
    program_id: str
    gcode: str
    tool_changes: List[str]
    estimated_minutes: float
    drill_holes: List[DrillHole] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "programId": self.program_id,
            "gcode": self.gcode,
            "toolChanges": list(self.tool_changes),
            "estimatedTime": self.estimated_minutes,
            "drillHoles": [hole.to_dict() for hole in self.drill_holes]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CNCPlan':
        return cls(
            program_id=data["programId"],
            gcode=data["gcode"],
            tool_changes=list(data.get("toolChanges", [])),
            estimated_minutes=float(data["estimatedTime"]),
            drill_holes=[DrillHole.from_dict(h) for h in data.get("drillHoles", [])]
        )


@dataclass(frozen=True)
class EdgeBand:
    """Banding decision for one edge; order is 0 when not banded."""
    band: bool
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"band": self.band, "order": self.order}


@dataclass(frozen=True)
class BandingPlan:
    """Edges to band and the order the edge bander runs them."""
    sequence: List[str]
    edges: Dict[str, EdgeBand]
    material: str = "ABS 2mm"
    color: str = "White"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bandingSequence": list(self.sequence),
            "bandingMaterial": self.material,
            "bandingColor": self.color,
            "edges": {name: self.edges[name].to_dict() for name in EDGES if name in self.edges}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BandingPlan':
        edges = {
            name: EdgeBand(band=bool(value["band"]), order=int(value.get("order", 0)))
            for name, value in data.get("edges", {}).items()
        }
        return cls(
            sequence=list(data.get("bandingSequence", [])),
            edges=edges,
            material=data.get("bandingMaterial", "ABS 2mm"),
            color=data.get("bandingColor", "White")
        )


@dataclass(frozen=True)
class PackagingPlan:
    """How the finished part is grouped, protected and labelled."""
    package_group: Optional[str]
    protection_type: str = "Standard"
    label_position: str = "Top"
    special_instructions: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "packageGroup": self.package_group,
            "protectionType": self.protection_type,
            "labelPosition": self.label_position,
            "specialInstructions": self.special_instructions
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PackagingPlan':
        return cls(
            package_group=data.get("packageGroup"),
            protection_type=data.get("protectionType", "Standard"),
            label_position=data.get("labelPosition", "Top"),
            special_instructions=data.get("specialInstructions", "")
        )


@dataclass
class ProductionPlan:
    """
    Manufacturing plan for a single part.

    The sub-plans are fixed when the plan is built. Only status,
    current_station and completed_stations change afterwards, and only
    forward through wallsaw -> cnc -> banding -> packaging -> complete.

    Attributes:
        part_id: The planned part
        order_id: Order the part belongs to (None for stand-alone plans)
        wall_saw_plan: Slab position and cut order
        cnc_plan: G-code program and time estimate
        banding_plan: Edge banding sequence
        packaging_plan: Packaging group and defaults
        status: pending, in_progress or completed
        current_station: Station the part is at, None before the wall saw
        completed_stations: Stations already left, in order
        generated_at: ISO timestamp of plan generation
    """
    part_id: str
    order_id: Optional[str]
    wall_saw_plan: WallSawPlan
    cnc_plan: CNCPlan
    banding_plan: BandingPlan
    packaging_plan: PackagingPlan
    status: PlanStatus = PlanStatus.PENDING
    current_station: Optional[Station] = None
    completed_stations: List[Station] = field(default_factory=list)
    generated_at: Optional[str] = None

    def next_station(self) -> Optional[Station]:
        """The only station the plan may advance to, None once completed."""
        if self.current_station is None:
            return Station.WALLSAW
        return self.current_station.next()

    def is_complete(self) -> bool:
        return self.status == PlanStatus.COMPLETED

    def advance_to(self, station: Any) -> None:
        """
        Move the part to the next station.

        Raises:
            OutOfOrderStationError: if the station is unknown, is not the one
                immediately following the current station, or the plan is
                already completed. The plan is left unchanged.
        """
        try:
            target = Station(station)
        except ValueError:
            raise OutOfOrderStationError(
                f"Unknown station {station!r} for part {self.part_id}",
                part_id=self.part_id, requested=str(station)
            ) from None

        current = self.current_station.value if self.current_station else None
        if self.is_complete():
            raise OutOfOrderStationError(
                f"Part {self.part_id} is already completed",
                part_id=self.part_id, current=current, requested=target.value
            )

        expected = self.next_station()
        if target != expected:
            raise OutOfOrderStationError(
                f"Part {self.part_id} cannot move from {current} to {target.value}, "
                f"next station is {expected.value}",
                part_id=self.part_id, current=current, requested=target.value,
                expected=expected.value
            )

        if self.current_station is not None:
            self.completed_stations.append(self.current_station)
        self.current_station = target
        if target == Station.COMPLETE:
            self.status = PlanStatus.COMPLETED
        else:
            self.status = PlanStatus.IN_PROGRESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON document stored by repositories."""
        return {
            "partId": self.part_id,
            "orderId": self.order_id,
            "wallSawPlan": self.wall_saw_plan.to_dict(),
            "cncPlan": self.cnc_plan.to_dict(),
            "bandingPlan": self.banding_plan.to_dict(),
            "packagingPlan": self.packaging_plan.to_dict(),
            "status": self.status.value,
            "currentStation": self.current_station.value if self.current_station else None,
            "completedStations": [s.value for s in self.completed_stations],
            "generatedAt": self.generated_at
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductionPlan':
        """Create ProductionPlan from its JSON document."""
        current = data.get("currentStation")
        return cls(
            part_id=data["partId"],
            order_id=data.get("orderId"),
            wall_saw_plan=WallSawPlan.from_dict(data["wallSawPlan"]),
            cnc_plan=CNCPlan.from_dict(data["cncPlan"]),
            banding_plan=BandingPlan.from_dict(data["bandingPlan"]),
            packaging_plan=PackagingPlan.from_dict(data["packagingPlan"]),
            status=PlanStatus(data.get("status", PlanStatus.PENDING.value)),
            current_station=Station(current) if current else None,
            completed_stations=[Station(s) for s in data.get("completedStations", [])],
            generated_at=data.get("generatedAt")
        )

    def __repr__(self) -> str:
        station = self.current_station.value if self.current_station else None
        return f"ProductionPlan(part={self.part_id}, status={self.status.value}, station={station})"
