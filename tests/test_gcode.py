"""Tests for G-code synthesis and time estimates."""

import pytest

from gcode import GCodeSynthesizer, MachineSettings
from gcode.synthesizer import fmt
from models import DrillHole, SequentialIdGenerator

from conftest import make_part


@pytest.fixture
def synthesizer():
    return GCodeSynthesizer(id_generator=SequentialIdGenerator("prog"))


class TestEstimate:
    """Machining time in minutes, rounded up to one decimal."""

    def test_perimeter_only(self, synthesizer):
        # 2 * (600 + 720) / 3000 = 0.88
        assert synthesizer.estimate_minutes(make_part("A", 600, 720)) == 0.9

    def test_exact_tenth_is_not_rounded_up(self, synthesizer):
        # 3000 / 3000 = 1.0
        assert synthesizer.estimate_minutes(make_part("A", 750, 750)) == 1.0

    def test_holes_add_drill_and_tool_change_time(self, synthesizer, side_panel):
        # 2560 / 3000 + 2 * 5 / 60 + 0.5 = 1.52
        assert synthesizer.estimate_minutes(side_panel) == 1.6

    def test_custom_feed_rate(self):
        synthesizer = GCodeSynthesizer(MachineSettings(feed_rate=6000))
        assert synthesizer.estimate_minutes(make_part("A", 600, 720)) == 0.5


class TestGCode:
    """Program text."""

    def test_preamble_and_footer(self, synthesizer):
        gcode = synthesizer.generate_gcode(make_part("A", 600, 720, name="Door"))
        lines = gcode.splitlines()

        assert lines[0] == "; Part: Door"
        assert lines[1] == "; Dimensions: 600 x 720 x 18mm"
        assert "G21 ; Set units to mm" in lines
        assert "G90 ; Absolute positioning" in lines
        assert "G17 ; XY plane selection" in lines
        assert lines[-3:] == ["M5 ; Spindle off", "G0 X0 Y0 Z50 ; Return home", "M30 ; Program end"]
        assert gcode.endswith("\n")

    def test_perimeter_moves(self, synthesizer):
        lines = synthesizer.generate_gcode(make_part("A", 600, 720)).splitlines()
        start = lines.index("; Perimeter cut")
        assert lines[start + 1:start + 8] == [
            "G0 X0 Y0 Z5",
            "G1 Z-18 F1000",
            "G1 X600 F3000",
            "G1 Y720",
            "G1 X0",
            "G1 Y0",
            "G0 Z5",
        ]

    def test_no_drill_section_without_holes(self, synthesizer):
        gcode = synthesizer.generate_gcode(make_part("A", 600, 720))
        assert "T1 M6" in gcode
        assert "T2 M6" not in gcode
        assert "Drilling" not in gcode

    def test_drill_holes_in_order(self, synthesizer, side_panel):
        lines = synthesizer.generate_gcode(side_panel).splitlines()

        assert "T2 M6" in lines
        first = lines.index("; Hole 1")
        second = lines.index("; Hole 2")
        assert first < second
        assert lines[first + 1:first + 4] == ["G0 X37 Y100 Z5", "G1 Z-12 F500", "G0 Z5"]
        # Explicit depth overrides the machine default
        assert lines[second + 2] == "G1 Z-10 F500"

    def test_identical_parts_give_identical_gcode(self, synthesizer):
        holes = (DrillHole(37, 100),)
        a = synthesizer.generate_gcode(make_part("A", 600, 720, name="Side", drill_holes=holes))
        b = synthesizer.generate_gcode(make_part("A", 600, 720, name="Side", drill_holes=holes))
        assert a == b

    def test_tool_change_comments(self, synthesizer, side_panel):
        lines = synthesizer.generate_gcode(side_panel).splitlines()
        assert lines[lines.index("T1 M6") - 1] == "; Tool change - 6mm End Mill"
        assert lines[lines.index("T2 M6") - 1] == "; Tool change - 5mm Drill"

    def test_line_breaks_in_name_stay_in_comment(self, synthesizer):
        gcode = synthesizer.generate_gcode(make_part("A", 600, 720, name="Door\nG1 Z-60 F3000\r\nM3"))
        lines = gcode.splitlines()

        assert lines[0] == "; Part: Door G1 Z-60 F3000 M3"
        assert lines[1] == "; Dimensions: 600 x 720 x 18mm"
        assert not any(line.startswith("G1 Z-60") for line in lines)

    def test_decimal_dimensions(self, synthesizer):
        gcode = synthesizer.generate_gcode(make_part("A", 562.5, 540, thickness=18.25))
        assert "; Dimensions: 562.5 x 540 x 18.25mm" in gcode
        assert "G1 X562.5 F3000" in gcode


class TestSynthesize:
    """Full program with id and tools."""

    def test_tools_and_program_id(self, synthesizer, side_panel):
        program = synthesizer.synthesize(side_panel)
        assert program.program_id == "CNC-prog_00001"
        assert program.tools == ["T1 - 6mm End Mill", "T2 - 5mm Drill"]
        assert program.estimated_minutes == 1.6

    def test_program_id_not_in_body(self, synthesizer):
        program = synthesizer.synthesize(make_part("A", 600, 720))
        assert program.tools == ["T1 - 6mm End Mill"]
        assert program.program_id not in program.gcode

    def test_program_ids_are_distinct(self, synthesizer):
        part = make_part("A", 600, 720)
        ids = [synthesizer.synthesize(part).program_id for _ in range(5)]
        assert ids == ["CNC-prog_00001", "CNC-prog_00002", "CNC-prog_00003", "CNC-prog_00004", "CNC-prog_00005"]

    def test_default_program_id_is_short(self):
        program = GCodeSynthesizer().synthesize(make_part("A", 600, 720))
        assert program.program_id.startswith("CNC-")
        assert len(program.program_id) == 12

    def test_configured_tool_slots(self, side_panel):
        settings = MachineSettings(perimeter_tool="8mm Compression Cutter", drill_tool_number=5)
        program = GCodeSynthesizer(settings).synthesize(side_panel)
        lines = program.gcode.splitlines()

        assert program.tools == ["T1 - 8mm Compression Cutter", "T5 - 5mm Drill"]
        assert "; Tool change - 8mm Compression Cutter" in lines
        assert "T5 M6" in lines
        assert "T2 M6" not in lines


@pytest.mark.parametrize("value,expected", [
    (600.0, "600"),
    (12.5, "12.5"),
    (0.0, "0"),
    (18.125, "18.125"),
])
def test_fmt(value, expected):
    assert fmt(value) == expected
