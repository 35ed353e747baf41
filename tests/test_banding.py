"""Tests for the edge banding planner."""

import pytest

from banding import BandingRule, EdgeBandingPlanner

from conftest import make_part


@pytest.fixture
def planner():
    return EdgeBandingPlanner()


class TestBandingRules:
    """Role keywords select the banded edges."""

    @pytest.mark.parametrize("role,expected", [
        ("backPanel", ()),
        ("shelf", ("top",)),
        ("leftPanel", ("top", "bottom", "left")),
        ("rightPanel", ("top", "bottom", "left")),
        ("sidePanel", ("top", "bottom", "left")),
        ("door", ("top", "bottom", "left", "right")),
        ("", ("top", "bottom", "left", "right")),
    ])
    def test_banded_edges(self, planner, role, expected):
        assert planner.banded_edges(role) == expected

    def test_matching_is_case_insensitive(self, planner):
        assert planner.banded_edges("Adjustable SHELF") == ("top",)

    def test_first_rule_wins(self, planner):
        # "back" is checked before "side"
        assert planner.banded_edges("backside") == ()

    def test_custom_rules(self):
        planner = EdgeBandingPlanner(rules=[BandingRule(keywords=("drawer",), banded=("top", "right"))],
                                     default=())
        assert planner.banded_edges("drawerFront") == ("top", "right")
        assert planner.banded_edges("shelf") == ()


class TestPlanBanding:
    """Edge map and banding sequence for a part."""

    def test_side_panel(self, planner):
        result = planner.plan_banding(make_part("S", 560, 720, role="leftPanel"))

        assert result.sequence == ["top", "bottom", "left"]
        assert result.edges["top"].band and result.edges["top"].order == 1
        assert result.edges["bottom"].order == 2
        assert result.edges["left"].order == 3
        assert not result.edges["right"].band
        assert result.edges["right"].order == 0

    def test_back_panel_has_no_banding(self, planner):
        result = planner.plan_banding(make_part("B", 600, 720, thickness=8, role="backPanel"))
        assert result.sequence == []
        assert not any(edge.band for edge in result.edges.values())

    def test_shelf(self, planner):
        result = planner.plan_banding(make_part("SH", 562, 540, role="shelf"))
        assert result.sequence == ["top"]

    def test_name_used_without_role(self, planner):
        result = planner.plan_banding(make_part("SH", 562, 540, name="Shelf 2"))
        assert result.sequence == ["top"]

    def test_sequence_matches_edge_orders(self, planner):
        result = planner.plan_banding(make_part("D", 596, 716, role="door"))
        assert result.sequence == ["top", "bottom", "left", "right"]
        assert [result.edges[e].order for e in result.sequence] == [1, 2, 3, 4]
