"""G-code synthesis for a single part: perimeter cut plus drilling."""

import math
from dataclasses import dataclass
from typing import List, Optional

from models.ids import IDGenerator, UUIDGenerator
from models.part import PartDescriptor


@dataclass(frozen=True)
class MachineSettings:
    """
    CNC parameters used for G-code and time estimates.

    Attributes:
        feed_rate: Perimeter feed in mm/min
        plunge_feed: Perimeter plunge feed in mm/min
        drill_feed: Drill plunge feed in mm/min
        seconds_per_hole: Time estimate per drilled hole
        tool_change_minutes: Overhead added when the drill tool is needed
        default_drill_depth: Drill depth for holes without one, in mm
        safe_z: Retract height between moves, in mm
        home_z: Z height for the final home move, in mm
        perimeter_tool: Perimeter cutter description
        drill_tool: Drill bit description
        perimeter_tool_number: Magazine slot of the perimeter cutter
        drill_tool_number: Magazine slot of the drill bit
        perimeter_spindle_rpm: Spindle speed for the perimeter cutter
        drill_spindle_rpm: Spindle speed for the drill bit
    """
    feed_rate: float = 3000.0
    plunge_feed: float = 1000.0
    drill_feed: float = 500.0
    seconds_per_hole: float = 5.0
    tool_change_minutes: float = 0.5
    default_drill_depth: float = 12.0
    safe_z: float = 5.0
    home_z: float = 50.0
    perimeter_tool: str = "6mm End Mill"
    drill_tool: str = "5mm Drill"
    perimeter_tool_number: int = 1
    drill_tool_number: int = 2
    perimeter_spindle_rpm: int = 18000
    drill_spindle_rpm: int = 12000

    @property
    def perimeter_tool_label(self) -> str:
        return f"T{self.perimeter_tool_number} - {self.perimeter_tool}"

    @property
    def drill_tool_label(self) -> str:
        return f"T{self.drill_tool_number} - {self.drill_tool}"


@dataclass(frozen=True)
class GCodeProgram:
    """A synthesized CNC program."""
    program_id: str
    gcode: str
    estimated_minutes: float
    tools: List[str]


def fmt(value: float) -> str:
    """Render a coordinate without trailing zeros (600.0 -> "600", 12.50 -> "12.5")."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _comment_text(text: str) -> str:
    """Text for a one-line G-code comment, line breaks folded into spaces."""
    return " ".join(text.split())


class GCodeSynthesizer:
    """
    Emits generic G-code for a rectangular part.

    The program body depends only on the part, so identical parts give
    byte-identical G-code. Program ids come from the injected generator and
    are not written into the body.
    """

    def __init__(self,
                 settings: Optional[MachineSettings] = None,
                 id_generator: Optional[IDGenerator] = None):
        self.settings = settings or MachineSettings()
        self.id_generator = id_generator or UUIDGenerator(length=8)

    def synthesize(self, part: PartDescriptor) -> GCodeProgram:
        """
        Build the CNC program for a part.

        Returns:
            GCodeProgram with G-code text, tool list and time estimate
        """
        tools = [self.settings.perimeter_tool_label]
        if part.drill_holes:
            tools.append(self.settings.drill_tool_label)
        return GCodeProgram(
            program_id=f"CNC-{self.id_generator.new_id()}",
            gcode=self.generate_gcode(part),
            estimated_minutes=self.estimate_minutes(part),
            tools=tools
        )

    def generate_gcode(self, part: PartDescriptor) -> str:
        """G-code text for the part's perimeter and drill holes."""
        s = self.settings
        w, h, d = fmt(part.width), fmt(part.height), fmt(part.thickness)
        safe = fmt(s.safe_z)

        lines = [
            f"; Part: {_comment_text(part.label)}",
            f"; Dimensions: {w} x {h} x {d}mm",
            "",
            "G21 ; Set units to mm",
            "G90 ; Absolute positioning",
            "G17 ; XY plane selection",
            "",
            f"; Tool change - {s.perimeter_tool}",
            f"T{s.perimeter_tool_number} M6",
            f"S{s.perimeter_spindle_rpm} M3 ; Spindle on",
            "",
            "; Perimeter cut",
            f"G0 X0 Y0 Z{safe}",
            f"G1 Z-{d} F{fmt(s.plunge_feed)}",
            f"G1 X{w} F{fmt(s.feed_rate)}",
            f"G1 Y{h}",
            "G1 X0",
            "G1 Y0",
            f"G0 Z{safe}",
        ]

        if part.drill_holes:
            lines += [
                "",
                f"; Tool change - {s.drill_tool}",
                f"T{s.drill_tool_number} M6",
                f"S{s.drill_spindle_rpm} M3",
                "",
                "; Drilling operations",
            ]
            for number, hole in enumerate(part.drill_holes, start=1):
                depth = hole.depth if hole.depth is not None else s.default_drill_depth
                lines += [
                    f"; Hole {number}",
                    f"G0 X{fmt(hole.x)} Y{fmt(hole.y)} Z{safe}",
                    f"G1 Z-{fmt(depth)} F{fmt(s.drill_feed)}",
                    f"G0 Z{safe}",
                ]

        lines += [
            "",
            "M5 ; Spindle off",
            f"G0 X0 Y0 Z{fmt(s.home_z)} ; Return home",
            "M30 ; Program end",
        ]
        return "\n".join(lines) + "\n"

    def estimate_minutes(self, part: PartDescriptor) -> float:
        """
        Estimated machining time in minutes, rounded up to one decimal.

        perimeter / feed + holes * seconds_per_hole / 60, plus one tool
        change when there are holes.
        """
        s = self.settings
        perimeter = 2 * (part.width + part.height)
        drill_count = len(part.drill_holes)

        perimeter_time = perimeter / s.feed_rate
        drill_time = drill_count * s.seconds_per_hole / 60
        tool_change_time = s.tool_change_minutes if drill_count > 0 else 0.0

        # round() absorbs float noise such as 0.30000000000000004 before ceil
        return math.ceil(round((perimeter_time + drill_time + tool_change_time) * 10, 6)) / 10

    def __repr__(self) -> str:
        return f"GCodeSynthesizer(feed_rate={self.settings.feed_rate:g})"
