"""Slab model for the production planner."""

from dataclasses import dataclass, field
from typing import List, Optional

from .part import PartDescriptor

SLAB_WIDTH = 2800.0
SLAB_HEIGHT = 2070.0
SLAB_MARGIN = 10.0
SAW_KERF = 4.0


@dataclass
class FreeRectangle:
    """Unplaced space on a slab, in mm."""
    x: float
    y: float
    w: float
    h: float

    def can_hold(self, width: float, height: float) -> bool:
        """True if a width x height rectangle fits without rotation."""
        return self.w >= width and self.h >= height


@dataclass
class Placement:
    """
    Position of one part on a slab.

    Attributes:
        part: The placed part
        x: Left edge on the slab (mm)
        y: Top edge on the slab (mm)
        sequence: 1-based cut order within the slab
        rotated: True if the part is turned by 90 degrees on the slab
        kerf: Saw blade width reserved to the right of and below the part
    """
    part: PartDescriptor
    x: float
    y: float
    sequence: int
    rotated: bool = False
    kerf: float = SAW_KERF

    @property
    def part_id(self) -> str:
        return self.part.id

    @property
    def width(self) -> float:
        """Width of the part as laid on the slab."""
        return self.part.height if self.rotated else self.part.width

    @property
    def height(self) -> float:
        """Height of the part as laid on the slab."""
        return self.part.width if self.rotated else self.part.height

    @property
    def reserved_width(self) -> float:
        return self.width + self.kerf

    @property
    def reserved_height(self) -> float:
        return self.height + self.kerf

    def overlaps(self, other: 'Placement') -> bool:
        """True if the reserved rectangles (part plus kerf) intersect."""
        return not (self.x + self.reserved_width <= other.x or
                    other.x + other.reserved_width <= self.x or
                    self.y + self.reserved_height <= other.y or
                    other.y + other.reserved_height <= self.y)

    def __repr__(self) -> str:
        rotated = ", rotated" if self.rotated else ""
        return f"Placement(part={self.part_id}, x={self.x:g}, y={self.y:g}, seq={self.sequence}{rotated})"


@dataclass
class Slab:
    """
    A sheet of raw material that parts are nested onto before cutting.

    The free-rectangle list belongs to the slab and is only mutated by the
    nesting run that created it.

    Attributes:
        id: Unique identifier
        material: Material label shared by every part on the slab
        width: Slab width in mm
        height: Slab height in mm
        margin: Unusable border on every side in mm
        free_rects: Remaining unplaced space
        placements: Placed parts in cut order
    """
    id: str
    material: str
    width: float = SLAB_WIDTH
    height: float = SLAB_HEIGHT
    margin: float = SLAB_MARGIN
    free_rects: List[FreeRectangle] = field(default_factory=list)
    placements: List[Placement] = field(default_factory=list)

    def __post_init__(self):
        if not self.free_rects and not self.placements:
            self.free_rects.append(FreeRectangle(
                x=self.margin,
                y=self.margin,
                w=self.usable_width,
                h=self.usable_height
            ))

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.margin

    @property
    def usable_area(self) -> float:
        return self.usable_width * self.usable_height

    def used_area(self) -> float:
        """Area reserved by placements, kerf included."""
        return sum(p.reserved_width * p.reserved_height for p in self.placements)

    def part_area(self) -> float:
        """Net area of the placed parts."""
        return sum(p.part.area for p in self.placements)

    def utilization(self) -> float:
        """Fraction of the full slab covered by parts."""
        return self.part_area() / (self.width * self.height)

    def waste(self) -> float:
        """Slab area not covered by parts, in mm²."""
        return self.width * self.height - self.part_area()

    def is_empty(self) -> bool:
        """True if no parts placed."""
        return len(self.placements) == 0

    def num_parts(self) -> int:
        return len(self.placements)

    def get_part_ids(self) -> List[str]:
        """Return list of part IDs in cut order."""
        return [p.part_id for p in sorted(self.placements, key=lambda p: p.sequence)]

    def placement_for(self, part_id: str) -> Optional[Placement]:
        """Get the placement of a part on this slab."""
        for placement in self.placements:
            if placement.part_id == part_id:
                return placement
        return None

    def __repr__(self) -> str:
        return (f"Slab(id={self.id}, material={self.material}, parts={self.num_parts()}, "
                f"utilization={self.utilization() * 100:.1f}%)")
