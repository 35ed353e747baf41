"""Guillotine first-fit nesting engine."""

import logging
from typing import List, Optional

from .base import NestingEngine
from models.errors import PartTooLargeForSlab
from models.ids import IDGenerator, UUIDGenerator
from models.part import PartDescriptor
from models.slab import (
    FreeRectangle,
    Placement,
    Slab,
    SAW_KERF,
    SLAB_HEIGHT,
    SLAB_MARGIN,
    SLAB_WIDTH,
)

logger = logging.getLogger(__name__)


class GuillotineNestingEngine(NestingEngine):
    """
    Nesting engine using first-fit decreasing over guillotine free rectangles.

    Algorithm:
    1. Sort parts by area (descending, ties keep input order)
    2. Place each part at the origin of the first free rectangle that holds
       it plus kerf, then split that rectangle into a right remainder (as
       tall as the part) and a bottom remainder (full rectangle width)
    3. When no free rectangle holds the part, close the slab and start a new one

    The free-rectangle search is a linear scan; order sizes are tens of parts.
    """

    def __init__(self,
                 slab_width: float = SLAB_WIDTH,
                 slab_height: float = SLAB_HEIGHT,
                 margin: float = SLAB_MARGIN,
                 kerf: float = SAW_KERF,
                 id_generator: Optional[IDGenerator] = None):
        """
        Initialize the nesting engine.

        Args:
            slab_width: Slab width in mm
            slab_height: Slab height in mm
            margin: Unusable border on every slab side in mm; remainders not
                larger than this in both directions are discarded
            kerf: Saw blade width in mm, reserved right of and below each part
            id_generator: Source of slab ids (random UUIDs by default)
        """
        self.slab_width = slab_width
        self.slab_height = slab_height
        self.margin = margin
        self.kerf = kerf
        self.id_generator = id_generator or UUIDGenerator()

    @property
    def usable_width(self) -> float:
        return self.slab_width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.slab_height - 2 * self.margin

    def pack(self, parts: List[PartDescriptor]) -> List[Slab]:
        """
        Nest parts onto slabs.

        Args:
            parts: Parts of one material

        Returns:
            List of slabs with assigned placements
        """
        # Step 1: Reject oversized parts before any slab is touched
        orientation = {}
        for part in parts:
            orientation[id(part)] = self._orientation(part)

        # Step 2: Sort parts
        sorted_parts = sorted(parts, key=lambda p: -p.area)

        # Step 3: Place parts
        slabs: List[Slab] = []
        material = parts[0].material if parts else ""
        current = self._new_slab(material)

        for part in sorted_parts:
            rotated = orientation[id(part)]
            if not self._place(current, part, rotated):
                slabs.append(current)
                logger.debug("Slab %s closed with %d parts", current.id, current.num_parts())
                current = self._new_slab(material)
                self._place(current, part, rotated)

        if not current.is_empty():
            slabs.append(current)

        logger.info("Nested %d %s parts onto %d slab(s)", len(parts), material, len(slabs))
        return slabs

    def check_fits(self, part: PartDescriptor) -> None:
        self._orientation(part)

    def _orientation(self, part: PartDescriptor) -> bool:
        """
        Decide how a part is laid on the slab.

        Returns:
            False if the part fits unrotated, True if it only fits rotated

        Raises:
            PartTooLargeForSlab: if it fits in neither orientation
        """
        w = part.width + self.kerf
        h = part.height + self.kerf
        if w <= self.usable_width and h <= self.usable_height:
            return False
        if h <= self.usable_width and w <= self.usable_height:
            return True
        raise PartTooLargeForSlab(
            f"Part {part.id} ({part.width:g}x{part.height:g}mm) does not fit a "
            f"{self.slab_width:g}x{self.slab_height:g}mm slab",
            part_id=part.id,
            width=part.width,
            height=part.height,
            usable_width=self.usable_width,
            usable_height=self.usable_height
        )

    def _new_slab(self, material: str) -> Slab:
        return Slab(
            id=self.id_generator.new_id(),
            material=material,
            width=self.slab_width,
            height=self.slab_height,
            margin=self.margin
        )

    def _place(self, slab: Slab, part: PartDescriptor, rotated: bool) -> bool:
        """
        Place a part in the first free rectangle that holds it.

        Returns:
            True if the part was placed, False if no free rectangle fits.
        """
        part_w = (part.height if rotated else part.width) + self.kerf
        part_h = (part.width if rotated else part.height) + self.kerf

        for index, rect in enumerate(slab.free_rects):
            if not rect.can_hold(part_w, part_h):
                continue

            placement = Placement(
                part=part,
                x=rect.x,
                y=rect.y,
                sequence=len(slab.placements) + 1,
                rotated=rotated,
                kerf=self.kerf
            )
            slab.placements.append(placement)
            logger.debug("Placed %s on %s at (%g, %g) seq %d",
                         part.id, slab.id, rect.x, rect.y, placement.sequence)

            # Guillotine split: right remainder keeps the part's height,
            # bottom remainder spans the whole consumed rectangle
            del slab.free_rects[index]
            remainders = (
                FreeRectangle(x=rect.x + part_w, y=rect.y, w=rect.w - part_w, h=part_h),
                FreeRectangle(x=rect.x, y=rect.y + part_h, w=rect.w, h=rect.h - part_h),
            )
            for remainder in remainders:
                if remainder.w > self.margin and remainder.h > self.margin:
                    slab.free_rects.append(remainder)
            return True

        return False

    def __repr__(self) -> str:
        return (f"GuillotineNestingEngine(slab={self.slab_width:g}x{self.slab_height:g}, "
                f"margin={self.margin:g}, kerf={self.kerf:g})")
