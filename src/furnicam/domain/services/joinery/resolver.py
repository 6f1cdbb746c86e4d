"""Join resolution: bind declared joins to parts and derive their dimensions.

Allowances are driven by each join's host/insert references and fit
class, never by matching part names.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from furnicam.domain.errors import InvalidGeometry
from furnicam.domain.value_objects import (
    CamJob,
    Edge,
    Join,
    JoinType,
    MortiseTenonOverrides,
    Part,
    Units,
)

from .config import JoineryConfig
from .models import DadoParams, MortiseTenonParams, RabbetParams, ResolvedJoint
from .rules import DEFAULT_RULES

if TYPE_CHECKING:
    from furnicam.contracts.protocols import JoineryRules
    from furnicam.domain.entities import ProductionSpec

logger = logging.getLogger(__name__)

# Declared mortise depth must match the derived tenon length to this tolerance (mm)
_DEPTH_MATCH_TOLERANCE = 1e-3


class JointResolver:
    """Applies joinery rules to every join of a production spec.

    Attributes:
        rules: The joinery rule set used for every join.
    """

    def __init__(self, rules: JoineryRules | None = None) -> None:
        self.rules = rules or DEFAULT_RULES

    def resolve(self, spec: ProductionSpec) -> tuple[ResolvedJoint, ...]:
        """Resolve all joins of ``spec`` in declaration order.

        Raises:
            DanglingReference: A join names an unknown part.
            MissingRequiredField: Required geometry cannot be derived.
            InvalidGeometry: A derived or declared dimension breaks a rule.
        """
        resolved = tuple(self.resolve_join(spec, join) for join in spec.joins)
        logger.info("Resolved %d joins for '%s'", len(resolved), spec.title or "untitled")
        return resolved

    def resolve_join(self, spec: ProductionSpec, join: Join) -> ResolvedJoint:
        """Resolve a single join against the parts of ``spec``."""
        host = spec.part_by_id(join.host_part_id, "host_part_id")
        insert = (
            spec.part_by_id(join.insert_part_id, "insert_part_id")
            if join.insert_part_id
            else None
        )

        if join.join_type is JoinType.MORTISE_TENON:
            assert insert is not None
            params = self._mortise_tenon(spec, join, host.thickness, insert.thickness)
            check_mortise_fit(join, params, host, insert)
        else:
            width = join.width
            allowance = spec.tolerances.allowance(join.fit)
            if width is None and insert is not None and allowance:
                width = insert.thickness + allowance
            insert_thickness = insert.thickness if insert is not None else None

            if join.join_type is JoinType.RABBET:
                assert insert_thickness is not None
                params = self.rules.rabbet(host.thickness, insert_thickness, width, join.depth)
            elif join.join_type is JoinType.DADO:
                params = self.rules.dado(
                    host.thickness, insert_thickness, width, join.depth, join.offset, join.axis
                )
            else:
                params = self.rules.groove(
                    host.thickness, insert_thickness, width, join.depth, join.offset, join.axis
                )

        logger.debug(
            "%s %s -> %s: %s",
            join.join_type.value,
            host.id,
            insert.id if insert else "-",
            params,
        )
        return ResolvedJoint(join=join, host=host, insert=insert, params=params)

    def _mortise_tenon(
        self,
        spec: ProductionSpec,
        join: Join,
        leg_thickness: float,
        apron_thickness: float,
    ) -> MortiseTenonParams:
        overrides = join.mortise_tenon or MortiseTenonOverrides()
        params = self.rules.mortise_tenon(
            leg_thickness,
            apron_thickness,
            join.apron_height_class or spec.apron_height_class,
            Units.MM,
            tenon_thickness=overrides.tenon_thickness,
            tenon_length=overrides.tenon_length,
            shoulder=overrides.shoulder,
            haunch=overrides.haunch,
        )
        if join.depth is not None and abs(join.depth - params.mortise.depth) > _DEPTH_MATCH_TOLERANCE:
            raise InvalidGeometry(
                "depth",
                f"mortise depth {join.depth:g} must equal the tenon length "
                f"{params.tenon.length:g}",
                join.depth,
            )
        return params


def cam_job_for(joint: ResolvedJoint) -> CamJob | None:
    """Build the CAM job for a resolved joint.

    Returns None for mortise-and-tenon joints, which are visualized but
    not toolpathed.
    """
    params = joint.params
    host = joint.host
    if isinstance(params, RabbetParams):
        return CamJob(
            job_type=JoinType.RABBET,
            host_length=host.length,
            host_width=host.width,
            width=params.width,
            depth=params.depth,
            label=host.name,
            edge=joint.join.host_edge,
        )
    if isinstance(params, DadoParams):
        return CamJob(
            job_type=joint.join_type,
            host_length=host.length,
            host_width=host.width,
            width=params.width,
            depth=params.depth,
            label=host.name,
            offset=params.offset,
            axis=params.axis,
        )
    return None


def jobs_from_joints(joints: Iterable[ResolvedJoint]) -> tuple[CamJob, ...]:
    """Build CAM jobs for every toolpathed joint, preserving order."""
    jobs = []
    for joint in joints:
        job = cam_job_for(joint)
        if job is not None:
            jobs.append(job)
    return tuple(jobs)


def check_mortise_fit(
    join: Join,
    params: MortiseTenonParams,
    leg: Part,
    apron: Part,
    depth_ceiling_ratio: float = JoineryConfig().depth_ceiling_ratio,
) -> None:
    """Check a mortise-and-tenon pair against the actual leg and apron outlines.

    The mortise runs along ``join.resolved_edge`` of the leg: along the
    leg length for E/W edges, along its width for N/S edges. It is cut
    into the leg across the other face dimension and centered in the leg
    thickness. The tenon spans the apron width.

    Raises:
        InvalidGeometry: ``offset`` or ``height`` when the mortise leaves
            the edge, ``width`` when it is not narrower than the leg,
            ``depth`` when it reaches the ceiling of the leg dimension it
            is cut into, ``tenon_width`` when the tenon is wider than the
            apron.
    """
    mortise = params.mortise
    if join.resolved_edge in (Edge.E, Edge.W):
        edge_length, into = leg.length, leg.width
    else:
        edge_length, into = leg.width, leg.length

    if mortise.height > edge_length:
        raise InvalidGeometry(
            "height",
            f"mortise height {mortise.height:g} exceeds the {edge_length:g} leg edge",
            mortise.height,
        )
    if join.offset is not None:
        start = join.offset - mortise.height / 2
        if start < 0 or start + mortise.height > edge_length:
            raise InvalidGeometry(
                "offset",
                f"mortise centered at {join.offset:g} leaves the {edge_length:g} leg edge",
                join.offset,
            )
    if mortise.width >= leg.thickness:
        raise InvalidGeometry(
            "width",
            f"mortise width {mortise.width:g} must be less than leg thickness "
            f"{leg.thickness:g}",
            mortise.width,
        )
    if mortise.depth >= depth_ceiling_ratio * into:
        raise InvalidGeometry(
            "depth",
            f"mortise depth {mortise.depth:g} reaches the {depth_ceiling_ratio:g} x "
            f"{into:g} leg ceiling",
            mortise.depth,
        )
    if params.tenon.width > apron.width:
        raise InvalidGeometry(
            "tenon_width",
            f"tenon width {params.tenon.width:g} exceeds apron width {apron.width:g}",
            params.tenon.width,
        )
