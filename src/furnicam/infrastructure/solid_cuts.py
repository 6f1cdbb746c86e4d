"""Solid cut builder: box solids per part with joinery removed.

Each part becomes an axis-aligned box in its own frame (X = width,
Y = length, Z = thickness, cuts entering from the top face), placed at
the part's declared position or laid out side by side along X. Channel
joints remove the same rectangle the toolpath emitter cuts. Mortises are
pocketed into the host edge and each tenon is added as a separate,
visible solid on the mating part.

All cutters belonging to one host are unioned and subtracted from its
box in a single boolean operation. Boolean work is delegated to an
injected :class:`~furnicam.contracts.protocols.BooleanBackend`.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import trimesh

from furnicam.domain.services.joinery import (
    MortiseTenonParams,
    ResolvedJoint,
    cam_job_for,
    check_mortise_fit,
)
from furnicam.domain.value_objects import Edge, Part

if TYPE_CHECKING:
    from furnicam.contracts.protocols import BooleanBackend
    from furnicam.domain.entities import ProductionSpec

logger = logging.getLogger(__name__)

# Cutters extend this far (mm) past every face they break through
CUTTER_OVERSHOOT = 0.5

# Gap (mm) between parts laid out along X when no position is declared
DEFAULT_PART_SPACING = 50.0

Origin = tuple[float, float, float]


@dataclass(frozen=True, eq=False)
class CutSolid:
    """A solid ready for display.

    Attributes:
        part_id: Id of the part the solid belongs to.
        label: Display label.
        kind: "part" for a cut part, "tenon" for a visible tenon protrusion.
        mesh: Closed triangle mesh in assembly space (mm). Shared with the
            cache when memoized; treat as read-only.
        cutter_count: Number of cutters removed from the part.
    """

    part_id: str
    label: str
    kind: str
    mesh: trimesh.Trimesh
    cutter_count: int = 0

    @property
    def volume(self) -> float:
        """Enclosed volume in cubic mm."""
        return float(self.mesh.volume)


def box_mesh(
    x0: float, y0: float, z0: float, x1: float, y1: float, z1: float
) -> trimesh.Trimesh:
    """Create a closed box mesh spanning two opposite corners."""
    box = trimesh.creation.box(extents=[x1 - x0, y1 - y0, z1 - z0])
    box.apply_translation([(x0 + x1) / 2, (y0 + y1) / 2, (z0 + z1) / 2])
    return box


class TrimeshBooleanBackend:
    """Boolean backend built on trimesh with the manifold3d engine.

    Attributes:
        engine: trimesh boolean engine name.
    """

    def __init__(self, engine: str = "manifold") -> None:
        self.engine = engine

    def union(self, a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
        return trimesh.boolean.union([a, b], engine=self.engine)

    def subtract(self, a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
        return trimesh.boolean.difference([a, b], engine=self.engine)


class SolidCutBuilder:
    """Builds cut solids for every part of a production spec.

    Attributes:
        backend: Boolean capability used for union and subtract.
        part_spacing: Gap between parts without a declared position.
    """

    def __init__(
        self,
        backend: BooleanBackend,
        part_spacing: float = DEFAULT_PART_SPACING,
    ) -> None:
        self.backend = backend
        self.part_spacing = part_spacing

    def build_cut_solids(
        self,
        spec: ProductionSpec,
        joins: Sequence[ResolvedJoint],
    ) -> tuple[CutSolid, ...]:
        """Build one cut solid per part, followed by one solid per tenon.

        Args:
            spec: The normalized production spec.
            joins: Resolved joints to realize on the parts of ``spec``.

        Returns:
            Part solids in cut-list order, then tenon solids in join order.

        Raises:
            DanglingReference: A joint refers to a part not in ``spec``.
            InvalidGeometry: A channel cut or mortise leaves its host outline,
                or a tenon is wider than its apron.
        """
        spec.validate_references([joint.join for joint in joins])
        origins = self.part_origins(spec)
        cutters: dict[str, list[trimesh.Trimesh]] = {part.id: [] for part in spec.parts}
        tenons: list[CutSolid] = []

        for joint in joins:
            host = spec.part_by_id(joint.join.host_part_id, "host_part_id")
            if isinstance(joint.params, MortiseTenonParams):
                assert joint.join.insert_part_id is not None
                insert = spec.part_by_id(joint.join.insert_part_id, "insert_part_id")
                check_mortise_fit(joint.join, joint.params, host, insert)
                cutters[host.id].append(
                    self._mortise_cutter(joint, host, origins[host.id])
                )
                tenons.append(self._tenon_solid(joint, insert, origins[insert.id]))
            else:
                cutters[host.id].append(self._channel_cutter(joint, host, origins[host.id]))

        solids: list[CutSolid] = []
        for part in spec.parts:
            x, y, z = origins[part.id]
            base = box_mesh(x, y, z, x + part.width, y + part.length, z + part.thickness)
            part_cutters = cutters[part.id]
            solids.append(
                CutSolid(
                    part_id=part.id,
                    label=part.name,
                    kind="part",
                    mesh=self._cut(base, part_cutters),
                    cutter_count=len(part_cutters),
                )
            )
            logger.debug("Part %s: %d cutters", part.id, len(part_cutters))

        solids.extend(tenons)
        return tuple(solids)

    def part_origins(self, spec: ProductionSpec) -> dict[str, Origin]:
        """Origin of every part: its declared position, else laid out along X."""
        origins: dict[str, Origin] = {}
        cursor = 0.0
        for part in spec.parts:
            if part.position is not None:
                origins[part.id] = (part.position.x, part.position.y, part.position.z)
            else:
                origins[part.id] = (cursor, 0.0, 0.0)
                cursor += part.width + self.part_spacing
        return origins

    def _cut(
        self, base: trimesh.Trimesh, cutters: list[trimesh.Trimesh]
    ) -> trimesh.Trimesh:
        if not cutters:
            return base
        combined = cutters[0]
        for cutter in cutters[1:]:
            combined = self.backend.union(combined, cutter)
        return self.backend.subtract(base, combined)

    def _channel_cutter(
        self, joint: ResolvedJoint, host: Part, origin: Origin
    ) -> trimesh.Trimesh:
        job = cam_job_for(joint)
        assert job is not None
        job.validate()
        x0, y0, x1, y1 = job.rectangle()

        # Break through every host face the cut rectangle touches
        if x0 <= 0:
            x0 -= CUTTER_OVERSHOOT
        if y0 <= 0:
            y0 -= CUTTER_OVERSHOOT
        if x1 >= host.width:
            x1 += CUTTER_OVERSHOOT
        if y1 >= host.length:
            y1 += CUTTER_OVERSHOOT

        ox, oy, oz = origin
        return box_mesh(
            ox + x0,
            oy + y0,
            oz + host.thickness - job.depth,
            ox + x1,
            oy + y1,
            oz + host.thickness + CUTTER_OVERSHOOT,
        )

    def _mortise_cutter(
        self, joint: ResolvedJoint, leg: Part, origin: Origin
    ) -> trimesh.Trimesh:
        params = joint.params
        assert isinstance(params, MortiseTenonParams)
        mortise = params.mortise
        edge = joint.join.resolved_edge
        offset = joint.join.offset

        z0 = leg.thickness / 2 - mortise.width / 2
        z1 = leg.thickness / 2 + mortise.width / 2

        if edge in (Edge.E, Edge.W):
            center = offset if offset is not None else leg.length / 2
            y0, y1 = center - mortise.height / 2, center + mortise.height / 2
            if edge is Edge.E:
                x0, x1 = leg.width - mortise.depth, leg.width + CUTTER_OVERSHOOT
            else:
                x0, x1 = -CUTTER_OVERSHOOT, mortise.depth
        else:
            center = offset if offset is not None else leg.width / 2
            x0, x1 = center - mortise.height / 2, center + mortise.height / 2
            if edge is Edge.N:
                y0, y1 = leg.length - mortise.depth, leg.length + CUTTER_OVERSHOOT
            else:
                y0, y1 = -CUTTER_OVERSHOOT, mortise.depth

        ox, oy, oz = origin
        return box_mesh(ox + x0, oy + y0, oz + z0, ox + x1, oy + y1, oz + z1)

    def _tenon_solid(
        self, joint: ResolvedJoint, apron: Part, origin: Origin
    ) -> CutSolid:
        params = joint.params
        assert isinstance(params, MortiseTenonParams)
        tenon = params.tenon

        x0 = apron.width / 2 - tenon.width / 2
        x1 = apron.width / 2 + tenon.width / 2
        z0 = apron.thickness / 2 - tenon.thickness / 2
        z1 = apron.thickness / 2 + tenon.thickness / 2
        # E/N hosts take the apron's start end, W/S hosts its far end
        if joint.join.resolved_edge in (Edge.E, Edge.N):
            y0, y1 = -tenon.length, 0.0
        else:
            y0, y1 = apron.length, apron.length + tenon.length

        ox, oy, oz = origin
        return CutSolid(
            part_id=apron.id,
            label=f"{apron.name} tenon",
            kind="tenon",
            mesh=box_mesh(ox + x0, oy + y0, oz + z0, ox + x1, oy + y1, oz + z1),
        )


class CutSolidCache:
    """Memoizes :meth:`SolidCutBuilder.build_cut_solids` by (spec, joins).

    Specs and resolved joints are immutable and hashable, so identical
    inputs map to the same key. Least recently used entries are evicted
    once ``maxsize`` is reached. Safe to share between threads.

    Attributes:
        builder: The builder doing the actual work on a miss.
        maxsize: Number of results kept.
        hits: Lookups answered from the cache.
        misses: Lookups that ran the builder.
    """

    def __init__(self, builder: SolidCutBuilder, maxsize: int = 32) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.builder = builder
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[tuple, tuple[CutSolid, ...]] = OrderedDict()
        self._lock = threading.Lock()

    def build_cut_solids(
        self,
        spec: ProductionSpec,
        joins: Sequence[ResolvedJoint],
    ) -> tuple[CutSolid, ...]:
        """Return cached solids for (spec, joins), building them on a miss."""
        joins = tuple(joins)
        key = (spec, joins)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached

        solids = self.builder.build_cut_solids(spec, joins)

        with self._lock:
            self.misses += 1
            self._entries[key] = solids
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
        return solids

    def clear(self) -> None:
        """Drop every cached result."""
        with self._lock:
            self._entries.clear()
