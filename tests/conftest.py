"""Shared fixtures for planner tests."""

from datetime import datetime, timezone

import pytest

from models import DrillHole, PartDescriptor, SequentialIdGenerator
from nesting import GuillotineNestingEngine
from planning import (
    InMemoryProductionPlanRepository,
    PlannerConfig,
    ProductionPlanBuilder,
    ProductionPlanningService,
)
from gcode import GCodeSynthesizer


def make_part(part_id, width, height, thickness=18, material="MDF 18mm", role="", **kwargs):
    return PartDescriptor(
        id=part_id,
        width=width,
        height=height,
        thickness=thickness,
        material=material,
        role=role,
        **kwargs
    )


def fixed_clock():
    return datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def config():
    return PlannerConfig()


@pytest.fixture
def engine():
    return GuillotineNestingEngine(id_generator=SequentialIdGenerator("slab"))


@pytest.fixture
def side_panel():
    return make_part(
        "SIDE-L", 560, 720, role="leftPanel", name="Left side",
        drill_holes=(DrillHole(37, 100), DrillHole(37, 132, depth=10)),
    )


@pytest.fixture
def builder(config):
    return ProductionPlanBuilder(
        config,
        synthesizer=GCodeSynthesizer(config.machine, id_generator=SequentialIdGenerator("prog")),
        id_generator=SequentialIdGenerator("solo"),
        clock=fixed_clock,
    )


@pytest.fixture
def repository():
    return InMemoryProductionPlanRepository()


@pytest.fixture
def service(config, builder, repository):
    return ProductionPlanningService(
        repository=repository,
        config=config,
        builder=builder,
        id_generator=SequentialIdGenerator("slab"),
    )


@pytest.fixture
def cabinet_records():
    """Part records in the shape the design subsystem sends them."""
    return [
        {"id": "P1", "name": "Left side", "partType": "leftPanel", "width": "560.00",
         "height": "720.00", "depth": "18.00", "material": "MDF 18mm",
         "drilling": [{"x": 37, "y": 100}, {"x": 37, "y": 132}]},
        {"id": "P2", "name": "Right side", "partType": "rightPanel", "width": 560,
         "height": 720, "depth": 18, "material": "MDF 18mm"},
        {"id": "P3", "name": "Shelf", "partType": "shelf", "width": 562, "height": 540,
         "thickness": 18, "material": "MDF 18mm", "color": "Grey"},
        {"id": "P4", "name": "Back panel", "partType": "backPanel", "width": 600,
         "height": 720, "depth": 8, "material": "HDF 8mm"},
        {"id": "P5", "name": "Door", "partType": "door", "width": 596, "height": 716,
         "depth": 18, "material": "Oak"},
    ]
