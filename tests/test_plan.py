"""Tests for production plans and the station state machine."""

import pytest

from models import OutOfOrderStationError, PlanStatus, ProductionPlan, Station

from conftest import make_part


@pytest.fixture
def plan(builder, side_panel):
    return builder.build(side_panel, "ORD-1")


def advance_through(plan, *stations):
    for station in stations:
        plan.advance_to(station)


class TestStationOrder:
    """Stations are visited strictly in order."""

    def test_new_plan_is_pending(self, plan):
        assert plan.status == PlanStatus.PENDING
        assert plan.current_station is None
        assert plan.completed_stations == []
        assert plan.next_station() == Station.WALLSAW

    def test_first_advance_starts_work(self, plan):
        plan.advance_to("wallsaw")
        assert plan.status == PlanStatus.IN_PROGRESS
        assert plan.current_station == Station.WALLSAW
        assert plan.completed_stations == []

    def test_full_run_completes(self, plan):
        advance_through(plan, "wallsaw", "cnc", "banding", "packaging", "complete")

        assert plan.status == PlanStatus.COMPLETED
        assert plan.is_complete()
        assert plan.current_station == Station.COMPLETE
        assert plan.completed_stations == [Station.WALLSAW, Station.CNC, Station.BANDING, Station.PACKAGING]
        assert plan.next_station() is None

    def test_accepts_enum_members(self, plan):
        advance_through(plan, Station.WALLSAW, Station.CNC)
        assert plan.current_station == Station.CNC

    def test_skipping_a_station_is_rejected(self, plan):
        with pytest.raises(OutOfOrderStationError) as exc_info:
            plan.advance_to("cnc")
        assert exc_info.value.details["expected"] == "wallsaw"
        assert plan.status == PlanStatus.PENDING
        assert plan.current_station is None

    def test_going_back_leaves_plan_unchanged(self, plan):
        advance_through(plan, "wallsaw", "cnc", "banding", "packaging")

        with pytest.raises(OutOfOrderStationError):
            plan.advance_to("cnc")

        assert plan.current_station == Station.PACKAGING
        assert plan.completed_stations == [Station.WALLSAW, Station.CNC, Station.BANDING]
        assert plan.status == PlanStatus.IN_PROGRESS

    def test_repeating_current_station_is_rejected(self, plan):
        plan.advance_to("wallsaw")
        with pytest.raises(OutOfOrderStationError):
            plan.advance_to("wallsaw")

    def test_completed_plan_cannot_advance(self, plan):
        advance_through(plan, "wallsaw", "cnc", "banding", "packaging", "complete")
        with pytest.raises(OutOfOrderStationError):
            plan.advance_to("complete")
        assert plan.completed_stations == [Station.WALLSAW, Station.CNC, Station.BANDING, Station.PACKAGING]

    def test_unknown_station_is_rejected(self, plan):
        with pytest.raises(OutOfOrderStationError) as exc_info:
            plan.advance_to("paint")
        assert exc_info.value.code == "OUT_OF_ORDER_STATION"
        assert plan.current_station is None


class TestStation:
    def test_next(self):
        assert Station.WALLSAW.next() == Station.CNC
        assert Station.PACKAGING.next() == Station.COMPLETE
        assert Station.COMPLETE.next() is None

    def test_string_values(self):
        assert Station("banding") is Station.BANDING
        assert Station.CNC == "cnc"


class TestPlanDocument:
    """JSON documents as stored by repositories."""

    def test_document_keys(self, plan):
        document = plan.to_dict()

        assert document["partId"] == "SIDE-L"
        assert document["orderId"] == "ORD-1"
        assert document["status"] == "pending"
        assert document["currentStation"] is None
        assert document["generatedAt"] == "2024-01-15T08:30:00+00:00"
        assert document["cncPlan"]["estimatedTime"] == 1.6
        assert document["cncPlan"]["toolChanges"] == ["T1 - 6mm End Mill", "T2 - 5mm Drill"]
        assert document["bandingPlan"]["bandingSequence"] == ["top", "bottom", "left"]
        assert document["bandingPlan"]["edges"]["right"] == {"band": False, "order": 0}
        assert document["packagingPlan"]["packageGroup"] == "ORD-1"
        assert document["wallSawPlan"]["cutSequence"] == 1

    def test_document_restores_progress(self, plan):
        advance_through(plan, "wallsaw", "cnc")
        restored = ProductionPlan.from_dict(plan.to_dict())

        assert restored == plan
        assert restored.current_station == Station.CNC
        assert restored.completed_stations == [Station.WALLSAW]
        restored.advance_to("banding")
        assert restored.status == PlanStatus.IN_PROGRESS

    def test_stand_alone_plan_without_order(self, builder):
        plan = builder.build(make_part("X", 300, 300))
        document = plan.to_dict()
        assert document["orderId"] is None
        assert document["packagingPlan"]["packageGroup"] is None
