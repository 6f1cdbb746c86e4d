"""Adapter to convert a ProjectConfiguration into domain objects.

This is the unit-conversion boundary: every length of the production
spec is converted from the file's ``units`` to millimeters here, exactly
once. Tooling stays in the file's units because G-code is emitted in
them.
"""

from __future__ import annotations

from furnicam.application.config.schema import (
    JoinSchema,
    PartSchema,
    ProductionSpecSchema,
    ProjectConfiguration,
)
from furnicam.domain.entities import ProductionSpec
from furnicam.domain.value_objects import (
    ApronHeightClass,
    Axis,
    Edge,
    Fit,
    Join,
    JoinType,
    Material,
    MortiseTenonOverrides,
    Overall,
    Part,
    Position3D,
    Tolerances,
    Tooling,
    Units,
    to_mm,
)
from furnicam.infrastructure.sheet_nesting import SheetConfig


def _mm(value: float | None, units: Units) -> float | None:
    return None if value is None else to_mm(value, units)


def _part(schema: PartSchema, units: Units) -> Part:
    position = None
    if schema.position is not None:
        position = Position3D(
            x=to_mm(schema.position.x, units),
            y=to_mm(schema.position.y, units),
            z=to_mm(schema.position.z, units),
        )
    return Part(
        id=schema.id,
        name=schema.name,
        thickness=to_mm(schema.thickness, units),
        length=to_mm(schema.length, units),
        width=to_mm(schema.width, units),
        quantity=schema.quantity,
        material=schema.material,
        notes=schema.notes,
        position=position,
        banded_edges=tuple(Edge(edge.value) for edge in schema.banded_edges),
        banding_overhang=_mm(schema.banding_overhang, units),
    )


def _join(schema: JoinSchema, units: Units) -> Join:
    overrides = None
    if schema.mortise_tenon is not None:
        mt = schema.mortise_tenon
        overrides = MortiseTenonOverrides(
            tenon_thickness=_mm(mt.tenon_thickness, units),
            tenon_length=_mm(mt.tenon_length, units),
            shoulder=_mm(mt.shoulder, units),
            haunch=_mm(mt.haunch, units),
        )
    return Join(
        join_type=JoinType(schema.join_type.value),
        host_part_id=schema.host_part_id,
        insert_part_id=schema.insert_part_id,
        host_edge=Edge(schema.host_edge.value) if schema.host_edge else None,
        axis=Axis(schema.axis.value) if schema.axis else None,
        offset=_mm(schema.offset, units),
        width=_mm(schema.width, units),
        depth=_mm(schema.depth, units),
        fit=Fit(schema.fit.value),
        mortise_tenon=overrides,
        apron_height_class=(
            ApronHeightClass(schema.apron_height_class.value)
            if schema.apron_height_class
            else None
        ),
    )


def _spec_schema(config: ProjectConfiguration | ProductionSpecSchema) -> ProductionSpecSchema:
    return config.spec if isinstance(config, ProjectConfiguration) else config


def config_units(config: ProjectConfiguration | ProductionSpecSchema) -> Units:
    """Unit system the file is written in."""
    return Units(_spec_schema(config).units.value)


def config_to_spec(config: ProjectConfiguration | ProductionSpecSchema) -> ProductionSpec:
    """Convert a configuration into a normalized (millimeter) ProductionSpec.

    Raises:
        FurnicamError: If the converted parts or joins are invalid, for
            example a join naming an unknown part.
    """
    schema = _spec_schema(config)
    units = Units(schema.units.value)

    defaults = Tolerances()
    tol = schema.tolerances
    tolerances = Tolerances(
        snug=defaults.snug if tol.snug is None else to_mm(tol.snug, units),
        standard=defaults.standard if tol.standard is None else to_mm(tol.standard, units),
        loose=defaults.loose if tol.loose is None else to_mm(tol.loose, units),
    )

    overall = None
    if schema.overall is not None:
        overall = Overall(
            width=to_mm(schema.overall.width, units),
            depth=to_mm(schema.overall.depth, units),
            height=to_mm(schema.overall.height, units),
        )

    return ProductionSpec(
        parts=tuple(_part(p, units) for p in schema.parts),
        joins=tuple(_join(j, units) for j in schema.joins),
        units=units,
        title=schema.metadata.title,
        furniture_type=schema.metadata.furniture_type,
        overall=overall,
        materials=tuple(
            Material(name=m.name, thickness=to_mm(m.thickness, units))
            for m in schema.materials
        ),
        tolerances=tolerances,
        apron_height_class=ApronHeightClass(schema.apron_height_class.value),
    )


def config_to_tooling(config: ProjectConfiguration) -> Tooling:
    """Tooling in the file's units, filling omitted values with unit defaults."""
    units = config_units(config)
    defaults = Tooling.default_for(units)
    tooling = config.tooling
    if tooling is None:
        return defaults

    def pick(value: float | None, default: float | None) -> float | None:
        return default if value is None else value

    return Tooling(
        endmill_diameter=pick(tooling.endmill_diameter, defaults.endmill_diameter),
        stepdown=pick(tooling.stepdown, defaults.stepdown),
        stepover=pick(tooling.stepover, defaults.stepover),
        feed_xy=tooling.feed_xy,
        feed_z=tooling.feed_z,
        safe_z=tooling.safe_z,
        cut_z=tooling.cut_z,
    )


def config_to_sheet(config: ProjectConfiguration) -> SheetConfig:
    """Stock sheet and cut allowances in millimeters; a 4x8 ft sheet unless overridden."""
    units = config_units(config)
    base = SheetConfig.for_units(units)
    sheet = config.sheet
    if sheet is None:
        return base
    return SheetConfig(
        width=base.width if sheet.width is None else to_mm(sheet.width, units),
        height=base.height if sheet.height is None else to_mm(sheet.height, units),
        gap=base.gap if sheet.gap is None else to_mm(sheet.gap, units),
        kerf=base.kerf if sheet.kerf is None else to_mm(sheet.kerf, units),
        banding_overhang=(
            base.banding_overhang
            if sheet.banding_overhang is None
            else to_mm(sheet.banding_overhang, units)
        ),
    )
