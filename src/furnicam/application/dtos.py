"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from furnicam.domain import CamJob, ProductionSpec, Tooling, Units
from furnicam.domain.services.joinery import ResolvedJoint

if TYPE_CHECKING:
    from furnicam.infrastructure.sheet_nesting import NestingResult, SheetConfig
    from furnicam.infrastructure.solid_cuts import CutSolid


@dataclass
class ManufacturingOutput:
    """Output DTO with every artifact derived from one production spec.

    Attributes:
        spec: The normalized spec everything was derived from.
        tooling: Tool parameters used for the G-code, in ``spec.units``.
        sheet: Stock sheet used for nesting (mm).
        joints: Resolved joints with their derived dimensions (mm).
        jobs: CAM jobs for every toolpathed joint (mm).
        nesting: Sheet layouts per material group.
        gcode: Joinery toolpath program in ``spec.units``.
        solids: Cut solids and visible tenons; empty when not requested.
    """

    spec: ProductionSpec
    tooling: Tooling
    sheet: SheetConfig
    joints: tuple[ResolvedJoint, ...]
    jobs: tuple[CamJob, ...]
    nesting: NestingResult
    gcode: str
    solids: tuple[CutSolid, ...] = field(default_factory=tuple)

    @property
    def units(self) -> Units:
        """Unit the spec was authored in."""
        return self.spec.units

    @property
    def project_name(self) -> str:
        """File-friendly project name derived from the spec title."""
        title = self.spec.title.strip() or "furniture"
        return "_".join(title.lower().split())
