"""Tests for units, parts, joins, tooling and CAM job value objects.

Tests cover:
- Unit conversion and length formatting
- Part and Join construction rules
- Tooling validation and per-unit defaults
- CamJob validation and cut rectangles
"""

from __future__ import annotations

import pytest

from furnicam.domain import (
    Axis,
    CamJob,
    Edge,
    Fit,
    InvalidGeometry,
    Join,
    JoinType,
    MissingRequiredField,
    MortiseTenonOverrides,
    Part,
    Tolerances,
    Tooling,
    Units,
)
from furnicam.domain.value_objects import (
    format_length,
    from_mm,
    inches_to,
    round_length,
    to_inches,
    to_mm,
)


# =============================================================================
# Units
# =============================================================================


class TestUnits:
    """Tests for unit conversion helpers."""

    def test_inch_converts_to_mm(self) -> None:
        """One inch is 25.4 mm."""
        assert to_mm(1.0, Units.INCH) == pytest.approx(25.4)
        assert to_mm(18.0, Units.MM) == 18.0

    def test_from_mm_round_trips(self) -> None:
        """from_mm reverses to_mm for inches."""
        assert from_mm(to_mm(0.75, Units.INCH), Units.INCH) == pytest.approx(0.75)

    def test_inch_helpers(self) -> None:
        """Inch helpers convert between inches and a target unit."""
        assert inches_to(0.5, Units.MM) == pytest.approx(12.7)
        assert inches_to(0.5, Units.INCH) == 0.5
        assert to_inches(12.7, Units.MM) == pytest.approx(0.5)

    def test_precision_per_unit(self) -> None:
        """mm rounds to 3 decimals and inches to 4."""
        assert round_length(6.66666, Units.MM) == 6.667
        assert round_length(0.262467, Units.INCH) == 0.2625

    def test_gcode_word(self) -> None:
        """G21 selects mm and G20 selects inches."""
        assert Units.MM.gcode_word == "G21"
        assert Units.INCH.gcode_word == "G20"

    @pytest.mark.parametrize(
        "value,units,expected",
        [
            (6.0, Units.MM, "6"),
            (-3.0, Units.MM, "-3"),
            (14.4, Units.MM, "14.4"),
            (0.25, Units.INCH, "0.25"),
            (1.57480315, Units.INCH, "1.5748"),
            (-0.0001, Units.MM, "0"),
        ],
    )
    def test_format_length(self, value: float, units: Units, expected: str) -> None:
        """Trailing zeros and a trailing point are stripped."""
        assert format_length(value, units) == expected


# =============================================================================
# Part
# =============================================================================


class TestPart:
    """Tests for Part construction."""

    def test_defaults(self) -> None:
        """Quantity defaults to 1 and material to Plywood."""
        part = Part(id="a", name="A", thickness=18, length=500, width=300)
        assert part.quantity == 1
        assert part.material == "Plywood"
        assert part.position is None

    @pytest.mark.parametrize("field", ["thickness", "length", "width"])
    def test_non_positive_dimension_rejected(self, field: str) -> None:
        """Every dimension must be positive."""
        values = {"thickness": 18.0, "length": 500.0, "width": 300.0}
        values[field] = 0.0
        with pytest.raises(InvalidGeometry) as exc_info:
            Part(id="a", name="A", **values)
        assert exc_info.value.field == field

    def test_empty_id_rejected(self) -> None:
        """A part needs an id."""
        with pytest.raises(MissingRequiredField) as exc_info:
            Part(id="", name="A", thickness=18, length=500, width=300)
        assert exc_info.value.field == "id"

    def test_zero_quantity_rejected(self) -> None:
        """Quantity must be at least one."""
        with pytest.raises(InvalidGeometry):
            Part(id="a", name="A", thickness=18, length=500, width=300, quantity=0)

    def test_piece_labels(self) -> None:
        """Copies are numbered; single parts keep their name."""
        single = Part(id="a", name="Top", thickness=18, length=500, width=300)
        multi = Part(id="b", name="Leg", thickness=45, length=700, width=45, quantity=3)
        assert single.piece_labels == ["Top"]
        assert multi.piece_labels == ["Leg #1", "Leg #2", "Leg #3"]

    def test_cut_size(self) -> None:
        """Cut size adds kerf and the overhang of each banded edge."""
        part = Part(
            id="a", name="Top", thickness=18, length=500, width=300,
            banded_edges=(Edge.N, Edge.E, Edge.W),
        )
        assert part.cut_size() == (300, 500)
        assert part.cut_size(kerf=3.0, banding_overhang=1.0) == (305, 504)

    def test_banding_validated(self) -> None:
        """Banded edges are unique and the overhang non-negative."""
        with pytest.raises(ValueError, match="twice"):
            Part(id="a", name="A", thickness=18, length=500, width=300,
                 banded_edges=(Edge.N, Edge.N))
        with pytest.raises(InvalidGeometry) as exc_info:
            Part(id="a", name="A", thickness=18, length=500, width=300, banding_overhang=-1.0)
        assert exc_info.value.field == "banding_overhang"


# =============================================================================
# Join
# =============================================================================


class TestJoin:
    """Tests for Join construction rules."""

    def test_rabbet_requires_insert(self) -> None:
        """RABBET joins need an insert part."""
        with pytest.raises(MissingRequiredField) as exc_info:
            Join(join_type=JoinType.RABBET, host_part_id="side", host_edge=Edge.E)
        assert exc_info.value.field == "insert_part_id"

    def test_rabbet_requires_edge(self) -> None:
        """RABBET joins need a host edge."""
        with pytest.raises(MissingRequiredField) as exc_info:
            Join(join_type=JoinType.RABBET, host_part_id="side", insert_part_id="back")
        assert exc_info.value.field == "host_edge"

    def test_mortise_tenon_requires_insert(self) -> None:
        """MORTISE_TENON joins need an insert part."""
        with pytest.raises(MissingRequiredField):
            Join(join_type=JoinType.MORTISE_TENON, host_part_id="leg")

    def test_dado_without_insert_allowed(self) -> None:
        """DADO and GROOVE may omit the insert."""
        join = Join(join_type=JoinType.DADO, host_part_id="side", width=12.0)
        assert join.insert_part_id is None

    def test_empty_host_rejected(self) -> None:
        """A join needs a host part id."""
        with pytest.raises(MissingRequiredField) as exc_info:
            Join(join_type=JoinType.DADO, host_part_id="")
        assert exc_info.value.field == "host_part_id"

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"width": 0.0}, "width"),
            ({"depth": -1.0}, "depth"),
            ({"offset": -5.0}, "offset"),
        ],
    )
    def test_invalid_declared_geometry(self, kwargs: dict, field: str) -> None:
        """Declared width and depth must be positive, offset non-negative."""
        with pytest.raises(InvalidGeometry) as exc_info:
            Join(join_type=JoinType.DADO, host_part_id="side", insert_part_id="shelf", **kwargs)
        assert exc_info.value.field == field

    def test_resolved_defaults(self) -> None:
        """Axis defaults to X and edge to E."""
        join = Join(join_type=JoinType.MORTISE_TENON, host_part_id="leg", insert_part_id="apron")
        assert join.resolved_axis is Axis.X
        assert join.resolved_edge is Edge.E
        assert join.fit is Fit.STANDARD

    def test_overrides_validated(self) -> None:
        """Mortise-and-tenon overrides must be positive."""
        with pytest.raises(InvalidGeometry):
            MortiseTenonOverrides(tenon_thickness=0.0)


class TestTolerances:
    """Tests for fit allowances."""

    def test_default_allowances(self) -> None:
        """Defaults are snug -0.10, standard 0 and loose +0.20 mm."""
        tolerances = Tolerances()
        assert tolerances.allowance(Fit.SNUG) == pytest.approx(-0.10)
        assert tolerances.allowance(Fit.STANDARD) == 0.0
        assert tolerances.allowance(Fit.LOOSE) == pytest.approx(0.20)


# =============================================================================
# Tooling
# =============================================================================


class TestTooling:
    """Tests for Tooling validation and defaults."""

    def test_mm_defaults(self) -> None:
        """mm tooling fills motion values for mm."""
        tooling = Tooling.default_for(Units.MM).with_defaults(Units.MM)
        assert tooling.endmill_diameter == 6.0
        assert tooling.feed_xy == 1200.0
        assert tooling.feed_z == 300.0
        assert tooling.safe_z == 6.0
        assert tooling.cut_z == -6.0

    def test_inch_defaults(self) -> None:
        """Inch tooling fills motion values for inches."""
        tooling = Tooling.default_for(Units.INCH).with_defaults(Units.INCH)
        assert tooling.endmill_diameter == 0.25
        assert tooling.feed_xy == 60.0
        assert tooling.safe_z == 0.25

    def test_declared_values_kept(self) -> None:
        """with_defaults only fills unset values."""
        tooling = Tooling(endmill_diameter=3, stepdown=1, stepover=0.5, feed_xy=800)
        filled = tooling.with_defaults(Units.MM)
        assert filled.feed_xy == 800
        assert filled.feed_z == 300.0

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"endmill_diameter": 0.0}, "endmill_diameter"),
            ({"stepdown": -1.0}, "stepdown"),
            ({"stepover": 0.0}, "stepover"),
            ({"stepover": 1.5}, "stepover"),
            ({"cut_z": 1.0}, "cut_z"),
            ({"safe_z": 0.0}, "safe_z"),
        ],
    )
    def test_invalid_tooling(self, kwargs: dict, field: str) -> None:
        """Tooling rejects non-positive sizes and out-of-range stepover."""
        values = {"endmill_diameter": 6.0, "stepdown": 2.0, "stepover": 0.4}
        values.update(kwargs)
        with pytest.raises(InvalidGeometry) as exc_info:
            Tooling(**values)
        assert exc_info.value.field == field


# =============================================================================
# CamJob
# =============================================================================


class TestCamJob:
    """Tests for CamJob validation and rectangles."""

    @pytest.mark.parametrize(
        "edge,expected",
        [
            (Edge.N, (0.0, 90.0, 50.0, 100.0)),
            (Edge.S, (0.0, 0.0, 50.0, 10.0)),
            (Edge.E, (40.0, 0.0, 50.0, 100.0)),
            (Edge.W, (0.0, 0.0, 10.0, 100.0)),
        ],
    )
    def test_rabbet_rectangle(self, edge: Edge, expected: tuple) -> None:
        """Rabbets run the full length of their edge."""
        job = CamJob(JoinType.RABBET, host_length=100, host_width=50, width=10, depth=3, edge=edge)
        assert job.rectangle() == pytest.approx(expected)

    def test_dado_centered_by_default(self) -> None:
        """An X-axis dado without offset is centered along Y."""
        job = CamJob(JoinType.DADO, host_length=100, host_width=50, width=10, depth=3)
        assert job.rectangle() == pytest.approx((0.0, 45.0, 50.0, 55.0))

    def test_groove_along_y(self) -> None:
        """A Y-axis groove runs the full length at its X offset."""
        job = CamJob(
            JoinType.GROOVE, host_length=100, host_width=50, width=6, depth=3,
            offset=20, axis=Axis.Y,
        )
        assert job.rectangle() == pytest.approx((17.0, 0.0, 23.0, 100.0))

    def test_mortise_tenon_job_rejected(self) -> None:
        """Mortise-and-tenon joints are not toolpathed."""
        job = CamJob(JoinType.MORTISE_TENON, host_length=100, host_width=50, width=6, depth=3)
        with pytest.raises(InvalidGeometry) as exc_info:
            job.validate()
        assert exc_info.value.field == "job_type"

    def test_rabbet_without_edge_rejected(self) -> None:
        """Rabbet jobs need an edge."""
        job = CamJob(JoinType.RABBET, host_length=100, host_width=50, width=10, depth=3)
        with pytest.raises(MissingRequiredField):
            job.validate()

    def test_cut_outside_host_rejected(self) -> None:
        """A dado whose offset pushes it past the host is rejected."""
        job = CamJob(
            JoinType.DADO, host_length=100, host_width=50, width=10, depth=3, offset=98
        )
        with pytest.raises(InvalidGeometry) as exc_info:
            job.validate()
        assert exc_info.value.field == "offset"

    def test_missing_host_dimensions_rejected(self) -> None:
        """Hosts need positive length and width."""
        job = CamJob(JoinType.DADO, host_length=0, host_width=50, width=10, depth=3)
        with pytest.raises(InvalidGeometry) as exc_info:
            job.validate()
        assert exc_info.value.field == "host_length"
