"""Tests for the part model."""

import pytest

from models import DrillHole, PartDescriptor, ValidationError


class TestPartValidation:
    """Dimensions are checked when a part is created."""

    def test_valid_part(self):
        part = PartDescriptor(id="A", width=600, height=720, thickness=18)
        assert part.area == 600 * 720
        assert part.material == "MDF 18mm"

    @pytest.mark.parametrize("field", ["width", "height", "thickness"])
    def test_non_positive_dimension_rejected(self, field):
        dims = {"width": 600, "height": 720, "thickness": 18}
        dims[field] = 0
        with pytest.raises(ValidationError) as exc_info:
            PartDescriptor(id="A", **dims)
        assert exc_info.value.details["field"] == field
        assert exc_info.value.code == "INVALID_PART"

    def test_negative_width_rejected(self):
        with pytest.raises(ValidationError):
            PartDescriptor(id="A", width=-1, height=720, thickness=18)


class TestPartFromDict:
    """Upstream records are normalized into PartDescriptors."""

    def test_decimal_strings_and_part_type(self):
        part = PartDescriptor.from_dict({
            "id": "P1", "partType": "shelf", "name": "Shelf 1",
            "width": "562.00", "height": "540.50", "depth": "18.00",
        }, order_id="ORD-1")
        assert part.width == 562.0
        assert part.height == 540.5
        assert part.thickness == 18.0
        assert part.role == "shelf"
        assert part.order_id == "ORD-1"

    def test_depth_wins_over_thickness(self):
        part = PartDescriptor.from_dict({"id": "P", "width": 1, "height": 1, "depth": 19, "thickness": 16})
        assert part.thickness == 19

    def test_thickness_used_without_depth(self):
        part = PartDescriptor.from_dict({"id": "P", "width": 1, "height": 1, "thickness": 16})
        assert part.thickness == 16

    def test_role_falls_back_to_name(self):
        part = PartDescriptor.from_dict({"id": "P", "name": "Back Panel", "width": 1, "height": 1, "depth": 8})
        assert part.role == ""
        assert part.part_type == "Back Panel"

    def test_drilling_parsed_in_order(self):
        part = PartDescriptor.from_dict({
            "id": "P", "width": 100, "height": 100, "depth": 18,
            "drilling": [{"x": 10, "y": 20}, {"x": 30, "y": 40, "depth": 9}],
        })
        assert part.drill_holes == (DrillHole(10, 20), DrillHole(30, 40, 9))

    def test_blank_material_gets_default(self):
        part = PartDescriptor.from_dict({"id": "P", "width": 1, "height": 1, "depth": 1, "material": ""})
        assert part.material == "MDF 18mm"

    @pytest.mark.parametrize("record", [
        {"id": "P", "height": 720, "depth": 18},
        {"id": "P", "width": 600, "depth": 18},
        {"id": "P", "width": 600, "height": 720},
        {"id": "P", "width": "abc", "height": 720, "depth": 18},
        {"width": 600, "height": 720, "depth": 18},
    ])
    def test_incomplete_records_rejected(self, record):
        with pytest.raises(ValidationError):
            PartDescriptor.from_dict(record)

    @pytest.mark.parametrize("drilling", [
        ["x=37,y=100"],
        [37, 100],
        [[37, 100]],
        "not json",
        {"x": 37, "y": 100},
        [{"x": "left", "y": 100}],
    ])
    def test_malformed_drilling_rejected(self, drilling):
        with pytest.raises(ValidationError) as exc_info:
            PartDescriptor.from_dict({"id": "P", "width": 100, "height": 100, "depth": 18, "drilling": drilling})
        assert exc_info.value.details["field"] == "drilling"

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, "two"])
    def test_invalid_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError) as exc_info:
            PartDescriptor.from_dict({"id": "P", "width": 100, "height": 100, "depth": 18, "quantity": quantity})
        assert exc_info.value.details["field"] == "quantity"

    def test_single_quantity_accepted(self):
        part = PartDescriptor.from_dict({"id": "P", "width": 100, "height": 100, "depth": 18, "quantity": 1})
        assert part.id == "P"

    def test_to_dict_keeps_upstream_keys(self):
        part = PartDescriptor.from_dict({"id": "P", "partType": "shelf", "width": 1, "height": 2, "depth": 3})
        data = part.to_dict()
        assert data["partType"] == "shelf"
        assert data["thickness"] == 3
        assert data["drilling"] == []


class TestErrors:
    def test_as_dict(self):
        error = ValidationError("Part 'A' is missing width", part_id="A", field="width")
        assert error.as_dict() == {
            "code": "INVALID_PART",
            "message": "Part 'A' is missing width",
            "part_id": "A",
            "field": "width",
        }
        assert str(error) == "Part 'A' is missing width"
