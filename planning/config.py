"""Planner configuration."""

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Tuple

from gcode.synthesizer import MachineSettings
from models.part import DEFAULT_MATERIAL
from models.slab import SAW_KERF, SLAB_HEIGHT, SLAB_MARGIN, SLAB_WIDTH

logger = logging.getLogger(__name__)


@dataclass
class PlannerConfig:
    """
    Shop constants used by the planner.

    Attributes:
        slab_width: Default slab width in mm
        slab_height: Default slab height in mm
        margin: Unusable slab border in mm
        kerf: Saw blade width in mm
        default_material: Material for parts without one
        material_slab_sizes: Material-specific slab sizes {material: {"width": w, "height": h}}
        machine: CNC parameters
        banding_material: Edge band strip
        banding_color: Strip colour for parts without a colour
        protection_type: Packaging protection
        label_position: Where the part label goes
    """
    slab_width: float = SLAB_WIDTH
    slab_height: float = SLAB_HEIGHT
    margin: float = SLAB_MARGIN
    kerf: float = SAW_KERF
    default_material: str = DEFAULT_MATERIAL
    material_slab_sizes: Dict[str, Dict[str, float]] = field(default_factory=dict)
    machine: MachineSettings = field(default_factory=MachineSettings)
    banding_material: str = "ABS 2mm"
    banding_color: str = "White"
    protection_type: str = "Standard"
    label_position: str = "Top"

    def get_slab_size_for_material(self, material: str) -> Tuple[float, float]:
        """
        Get slab size (width, height) for a specific material.
        Falls back to the default slab size if the material is not configured.
        """
        if material in self.material_slab_sizes:
            size = self.material_slab_sizes[material]
            return (float(size.get("width", self.slab_width)),
                    float(size.get("height", self.slab_height)))
        return self.slab_width, self.slab_height

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlannerConfig':
        """
        Create PlannerConfig from a dict, e.g. parsed JSON.

        Keys starting with an underscore are comments and ignored, as are
        unknown keys (logged at warning level).
        """
        known = {f.name for f in fields(cls)}
        machine_known = {f.name for f in fields(MachineSettings)}
        kwargs: Dict[str, Any] = {}

        for key, value in data.items():
            if key.startswith("_"):
                continue
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)
                continue
            if key == "machine":
                machine = {k: v for k, v in value.items() if k in machine_known}
                kwargs[key] = MachineSettings(**machine)
            elif key == "material_slab_sizes":
                kwargs[key] = {
                    material: size for material, size in value.items()
                    if not material.startswith("_") and isinstance(size, dict)
                }
            else:
                kwargs[key] = value

        return cls(**kwargs)

    @classmethod
    def load_from_file(cls, config_path: str) -> 'PlannerConfig':
        """Load configuration from a JSON file."""
        with open(config_path, 'r') as f:
            data = json.load(f)
        logger.info("Loaded planner config from %s", config_path)
        return cls.from_dict(data)
