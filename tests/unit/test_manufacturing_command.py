"""Tests for the service factory and the manufacturing command."""

from __future__ import annotations

import logging

import pytest

from furnicam.application import ManufacturingCommand, ServiceFactory
from furnicam.domain import (
    InvalidGeometry,
    Join,
    JoinType,
    Part,
    PartTooLarge,
    ProductionSpec,
    Tooling,
    Units,
)
from furnicam.domain.services.joinery import DefaultJoineryRules, JoineryConfig
from furnicam.infrastructure.sheet_nesting import SheetConfig
from furnicam.infrastructure.solid_cuts import CutSolidCache, SolidCutBuilder


@pytest.fixture
def factory(recording_backend) -> ServiceFactory:
    return ServiceFactory(backend=recording_backend)


@pytest.fixture
def command(factory: ServiceFactory) -> ManufacturingCommand:
    return factory.create_manufacturing_command()


# =============================================================================
# Factory
# =============================================================================


class TestServiceFactory:
    """Tests for eager service construction."""

    def test_services_built_up_front(self, factory: ServiceFactory, recording_backend) -> None:
        """Every service exists as soon as the factory does."""
        assert factory.resolver.rules is factory.rules
        assert factory.nesting_service.sheet is factory.sheet
        assert isinstance(factory.solid_builder, CutSolidCache)
        assert factory.solid_builder.builder.backend is recording_backend

    def test_cache_disabled(self, recording_backend) -> None:
        """A cache size of zero uses the builder directly."""
        factory = ServiceFactory(backend=recording_backend, cache_size=0)
        assert isinstance(factory.solid_builder, SolidCutBuilder)

    def test_command_shares_services(self, factory: ServiceFactory) -> None:
        """Commands receive the factory's instances by reference."""
        first = factory.create_manufacturing_command()
        second = factory.create_manufacturing_command()
        assert first.resolver is second.resolver is factory.resolver
        assert first.solid_builder is factory.solid_builder

    def test_custom_rules_and_sheet(self, recording_backend) -> None:
        """Injected rules and sheet reach the services."""
        rules = DefaultJoineryRules(JoineryConfig(dado_depth_ratio=0.5))
        sheet = SheetConfig(width=600, height=1200, gap=3)
        factory = ServiceFactory(rules=rules, sheet=sheet, backend=recording_backend)
        assert factory.resolver.rules is rules
        assert factory.nesting_service.nester.sheet is sheet

    def test_comments_setting(self, recording_backend) -> None:
        """include_comments configures the emitter."""
        factory = ServiceFactory(backend=recording_backend, include_comments=False)
        assert factory.emitter.include_comments is False


# =============================================================================
# Command
# =============================================================================


class TestManufacturingCommand:
    """Tests for ManufacturingCommand.execute."""

    def test_bookcase_output(self, command: ManufacturingCommand, bookcase_spec: ProductionSpec) -> None:
        """All artifacts are derived from the spec."""
        output = command.execute(bookcase_spec)

        assert output.spec is bookcase_spec
        assert output.units is Units.MM
        assert len(output.joints) == 2
        assert len(output.jobs) == 2
        assert output.nesting.total_sheets == 2
        assert "(Job 1: RABBET Side  edge E  6 wide x 6 deep)" in output.gcode
        assert "(Job 2: DADO Side  axis X  18 wide x 6 deep)" in output.gcode
        assert [s.part_id for s in output.solids] == ["side", "shelf", "back"]
        assert output.sheet == SheetConfig()

    def test_default_tooling_per_unit(
        self, command: ManufacturingCommand, bookcase_spec: ProductionSpec
    ) -> None:
        """Omitted tooling defaults for the spec's unit."""
        output = command.execute(bookcase_spec, include_solids=False)
        assert output.tooling == Tooling.default_for(Units.MM)
        assert "tool: 6," in output.gcode

    def test_without_solids(
        self, command: ManufacturingCommand, recording_backend, bookcase_spec: ProductionSpec
    ) -> None:
        """Solids can be skipped entirely."""
        output = command.execute(bookcase_spec, include_solids=False)
        assert output.solids == ()
        assert recording_backend.calls == []

    def test_mortise_tenon_has_no_jobs(self, command: ManufacturingCommand, table_spec: ProductionSpec) -> None:
        """Mortise-and-tenon joints are resolved but not toolpathed."""
        output = command.execute(table_spec)
        assert len(output.joints) == 1
        assert output.jobs == ()
        assert "Job" not in output.gcode
        assert [s.kind for s in output.solids] == ["part", "part", "tenon"]

    def test_parallel_matches_serial(self, recording_backend, bookcase_spec: ProductionSpec) -> None:
        """Worker threads produce the same artifacts as a serial run."""
        serial = ServiceFactory(backend=recording_backend, cache_size=0)
        parallel = ServiceFactory(backend=recording_backend, cache_size=0)

        a = serial.create_manufacturing_command().execute(bookcase_spec)
        b = parallel.create_manufacturing_command().execute(bookcase_spec, parallel=True)

        assert a.joints == b.joints
        assert a.jobs == b.jobs
        assert a.gcode == b.gcode
        assert a.nesting == b.nesting
        assert [s.volume for s in a.solids] == pytest.approx([s.volume for s in b.solids])

    def test_repeat_execution_uses_cache(
        self, command: ManufacturingCommand, recording_backend, bookcase_spec: ProductionSpec
    ) -> None:
        """Executing twice reuses the memoized solids."""
        first = command.execute(bookcase_spec)
        calls = len(recording_backend.calls)
        second = command.execute(bookcase_spec)
        assert second.solids is first.solids
        assert len(recording_backend.calls) == calls

    def test_logs_summary(
        self,
        command: ManufacturingCommand,
        bookcase_spec: ProductionSpec,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A summary line is logged at INFO."""
        with caplog.at_level(logging.INFO, logger="furnicam.application.commands"):
            command.execute(bookcase_spec, include_solids=False)
        assert "Built 2 joints, 2 CAM jobs, 2 sheets, 0 solids" in caplog.text


class TestManufacturingCommandErrors:
    """Tests for error propagation."""

    def test_rule_violation_aborts(
        self, command: ManufacturingCommand, recording_backend, bookcase_parts: tuple[Part, ...]
    ) -> None:
        """A too-deep dado aborts before any solid is built."""
        spec = ProductionSpec(
            parts=bookcase_parts,
            joins=(
                Join(join_type=JoinType.DADO, host_part_id="side", insert_part_id="shelf", depth=15.0),
            ),
        )
        with pytest.raises(InvalidGeometry) as exc_info:
            command.execute(spec)
        assert exc_info.value.field == "depth"
        assert recording_backend.calls == []

    def test_job_outside_host_aborts(
        self, command: ManufacturingCommand, bookcase_parts: tuple[Part, ...]
    ) -> None:
        """A dado placed past the host end is rejected."""
        spec = ProductionSpec(
            parts=bookcase_parts,
            joins=(
                Join(join_type=JoinType.DADO, host_part_id="side", insert_part_id="shelf", offset=895.0),
            ),
        )
        with pytest.raises(InvalidGeometry) as exc_info:
            command.execute(spec)
        assert exc_info.value.field == "offset"

    @pytest.mark.parametrize("parallel", [False, True])
    def test_nesting_error_propagates(self, command: ManufacturingCommand, parallel: bool) -> None:
        """PartTooLarge surfaces from serial and threaded runs alike."""
        spec = ProductionSpec(
            parts=(Part(id="top", name="Top", thickness=18, length=3000, width=900),),
        )
        with pytest.raises(PartTooLarge):
            command.execute(spec, include_solids=False, parallel=parallel)


class TestCutlistOutlines:
    """Tests for cut-list outline programs."""

    def test_bookcase_outlines(self, command: ManufacturingCommand, bookcase_spec: ProductionSpec) -> None:
        """All parts share one sheet series regardless of thickness."""
        program = command.cutlist_outlines(bookcase_spec)
        assert "(--- SHEET 1 ---)" in program
        assert "(--- SHEET 2 ---)" not in program
        assert program.count("(Part: ") == 4
        assert "(Part: Back  800 x 900  @ 5,910)" in program
