"""Part model for the production planner."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ValidationError

DEFAULT_MATERIAL = "MDF 18mm"


@dataclass(frozen=True)
class DrillHole:
    """
    A single drilling position on a part.

    Attributes:
        x: X position in mm, relative to the part's origin
        y: Y position in mm, relative to the part's origin
        depth: Drill depth in mm (None means the machine default)
    """
    x: float
    y: float
    depth: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"x": self.x, "y": self.y, "depth": self.depth}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DrillHole':
        """Create DrillHole from dictionary."""
        depth = data.get("depth")
        return cls(
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            depth=float(depth) if depth not in (None, "") else None
        )


@dataclass(frozen=True)
class PartDescriptor:
    """
    Normalized view of a cabinet part, as handed over by the design/order side.

    Attributes:
        id: Part identifier
        width: Width in mm
        height: Height in mm
        thickness: Board thickness in mm (cut depth on the CNC)
        material: Material label, used to group parts onto slabs
        role: Free-text part type ("shelf", "leftPanel", "backPanel", ...)
        name: Display name
        order_id: Order the part belongs to, if known
        color: Surface colour, used for the banding strip
        drill_holes: Drilling positions in machining order
    """
    id: str
    width: float
    height: float
    thickness: float
    material: str = DEFAULT_MATERIAL
    role: str = ""
    name: str = ""
    order_id: Optional[str] = None
    color: Optional[str] = None
    drill_holes: Tuple[DrillHole, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for attr in ("width", "height", "thickness"):
            value = getattr(self, attr)
            if value is None or value != value:
                raise ValidationError(f"Part {self.id!r} is missing {attr}", part_id=self.id, field=attr)
            if value <= 0:
                raise ValidationError(
                    f"Part {self.id!r} has non-positive {attr}: {value}",
                    part_id=self.id, field=attr
                )

    @property
    def area(self) -> float:
        """Area in mm²."""
        return self.width * self.height

    @property
    def label(self) -> str:
        """Name for operators, falls back to the id."""
        return self.name or self.id

    @property
    def part_type(self) -> str:
        """Role used by banding rules; falls back to the name."""
        return self.role or self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "partType": self.role,
            "orderId": self.order_id,
            "width": self.width,
            "height": self.height,
            "thickness": self.thickness,
            "material": self.material,
            "color": self.color,
            "drilling": [hole.to_dict() for hole in self.drill_holes]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], order_id: Optional[str] = None) -> 'PartDescriptor':
        """
        Create a PartDescriptor from an upstream part record.

        Accepts both ``partType`` and ``role`` for the role, and both ``depth``
        and ``thickness`` for the board thickness (``depth`` wins).

        Raises:
            ValidationError: if the id or a dimension is missing or invalid,
                or drilling or quantity is malformed
        """
        part_id = data.get("id")
        if part_id in (None, ""):
            raise ValidationError("Part record has no id", field="id")
        part_id = str(part_id)

        thickness_raw = data.get("depth")
        if thickness_raw in (None, ""):
            thickness_raw = data.get("thickness")

        if data.get("quantity") is not None:
            _check_quantity(data["quantity"], part_id)

        drilling = data.get("drilling") or data.get("drillHoles") or []
        if not isinstance(drilling, (list, tuple)):
            raise ValidationError(
                f"Part {part_id!r} has invalid drilling: {drilling!r}",
                part_id=part_id, field="drilling"
            )

        holes: List[DrillHole] = []
        for hole in drilling:
            if not isinstance(hole, Mapping):
                raise ValidationError(
                    f"Part {part_id!r} has an invalid drill hole: {hole!r}",
                    part_id=part_id, field="drilling"
                )
            try:
                holes.append(DrillHole.from_dict(hole))
            except (TypeError, ValueError) as exc:
                raise ValidationError(
                    f"Part {part_id!r} has an invalid drill hole: {hole!r}",
                    part_id=part_id, field="drilling"
                ) from exc

        return cls(
            id=part_id,
            width=_to_dimension(data.get("width"), part_id, "width"),
            height=_to_dimension(data.get("height"), part_id, "height"),
            thickness=_to_dimension(thickness_raw, part_id, "thickness"),
            material=str(data.get("material") or DEFAULT_MATERIAL),
            role=str(data.get("partType") or data.get("role") or ""),
            name=str(data.get("name") or ""),
            order_id=order_id if order_id is not None else data.get("orderId"),
            color=data.get("color") or None,
            drill_holes=tuple(holes)
        )

    def __repr__(self) -> str:
        return (f"PartDescriptor(id={self.id}, {self.width:g}x{self.height:g}x{self.thickness:g}mm, "
                f"material={self.material}, role={self.part_type})")


def _to_dimension(value: Any, part_id: str, attr: str) -> float:
    """Parse a dimension that may arrive as a number or a decimal string."""
    if value is None or value == "":
        raise ValidationError(f"Part {part_id!r} is missing {attr}", part_id=part_id, field=attr)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Part {part_id!r} has an invalid {attr}: {value!r}",
            part_id=part_id, field=attr
        ) from exc


def _check_quantity(value: Any, part_id: str) -> None:
    """Quantities must be whole numbers of at least one."""
    try:
        quantity = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Part {part_id!r} has an invalid quantity: {value!r}",
            part_id=part_id, field="quantity"
        ) from exc
    if quantity != quantity or quantity < 1 or not quantity.is_integer():
        raise ValidationError(
            f"Part {part_id!r} has an invalid quantity: {value!r}",
            part_id=part_id, field="quantity"
        )
