"""Application commands (use cases) for furniture manufacturing output."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from furnicam.domain import ProductionSpec, Tooling
from furnicam.domain.services.joinery import JointResolver, jobs_from_joints
from furnicam.infrastructure.gcode import ToolpathEmitter
from furnicam.infrastructure.sheet_nesting import SheetNestingService
from furnicam.infrastructure.solid_cuts import CutSolid, CutSolidCache, SolidCutBuilder

from .dtos import ManufacturingOutput

logger = logging.getLogger(__name__)


class ManufacturingCommand:
    """Command to derive joints, nesting, G-code and cut solids for a spec.

    Joints are resolved and every CAM job validated first; any error
    aborts before an artifact is produced. The remaining three outputs
    depend only on the spec and the resolved joints, so they can be
    computed concurrently.
    """

    def __init__(
        self,
        resolver: JointResolver,
        nesting_service: SheetNestingService,
        emitter: ToolpathEmitter,
        solid_builder: SolidCutBuilder | CutSolidCache,
    ) -> None:
        self.resolver = resolver
        self.nesting_service = nesting_service
        self.emitter = emitter
        self.solid_builder = solid_builder

    def execute(
        self,
        spec: ProductionSpec,
        tooling: Tooling | None = None,
        *,
        include_solids: bool = True,
        parallel: bool = False,
    ) -> ManufacturingOutput:
        """Execute the command.

        Args:
            spec: Normalized production spec (mm).
            tooling: Tool parameters in ``spec.units``; defaults per unit.
            include_solids: Build cut solids (the costly boolean step).
            parallel: Compute nesting, G-code and solids on worker threads.

        Returns:
            ManufacturingOutput with every artifact.

        Raises:
            FurnicamError: Any rule, reference or nesting failure. Errors
                propagate unchanged; nothing partial is returned.
        """
        tooling = tooling or Tooling.default_for(spec.units)
        joints = self.resolver.resolve(spec)
        jobs = jobs_from_joints(joints)
        for job in jobs:
            job.validate()

        solids: tuple[CutSolid, ...] = ()
        if parallel:
            with ThreadPoolExecutor(max_workers=3, thread_name_prefix="furnicam") as pool:
                nesting_future = pool.submit(self.nesting_service.nest_spec, spec)
                gcode_future = pool.submit(self.emitter.emit, jobs, tooling, spec.units)
                solids_future = (
                    pool.submit(self.solid_builder.build_cut_solids, spec, joints)
                    if include_solids
                    else None
                )
                nesting = nesting_future.result()
                gcode = gcode_future.result()
                if solids_future is not None:
                    solids = solids_future.result()
        else:
            nesting = self.nesting_service.nest_spec(spec)
            gcode = self.emitter.emit(jobs, tooling, spec.units)
            if include_solids:
                solids = self.solid_builder.build_cut_solids(spec, joints)

        logger.info(
            "Built %d joints, %d CAM jobs, %d sheets, %d solids",
            len(joints),
            len(jobs),
            nesting.total_sheets,
            len(solids),
        )
        return ManufacturingOutput(
            spec=spec,
            tooling=tooling,
            sheet=self.nesting_service.sheet,
            joints=joints,
            jobs=jobs,
            nesting=nesting,
            gcode=gcode,
            solids=solids,
        )

    def cutlist_outlines(self, spec: ProductionSpec, tooling: Tooling | None = None) -> str:
        """G-code tracing every piece of the cut list on its nested sheet.

        All parts share one sheet series regardless of material.
        """
        tooling = tooling or Tooling.default_for(spec.units)
        placements = self.nesting_service.nester.nest_parts(spec.parts)
        return self.emitter.emit_cutlist_outlines(placements, tooling, spec.units)
