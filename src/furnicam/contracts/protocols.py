"""Service protocols for dependency injection.

This module defines protocol classes that establish contracts between layers.
Concrete implementations are selected once, when the service factory is
built, and passed by reference to whichever component needs them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import trimesh

    from furnicam.domain.services.joinery.models import (
        DadoParams,
        GrooveParams,
        MortiseTenonParams,
        RabbetParams,
    )
    from furnicam.domain.value_objects import ApronHeightClass, Axis, Units


@runtime_checkable
class JoineryRules(Protocol):
    """Protocol for deriving joint dimensions from part thicknesses.

    The engine ships one implementation, ``DefaultJoineryRules``. All
    methods are pure: the same inputs always produce the same dimensions
    or the same error.

    Example:
        ```python
        rules: JoineryRules = DefaultJoineryRules()
        params = rules.rabbet(18.0, 6.0)
        assert (params.width, params.depth) == (6.0, 6.0)
        ```
    """

    def rabbet(
        self,
        host_thickness: float,
        insert_thickness: float,
        width_override: float | None = None,
        depth_override: float | None = None,
    ) -> RabbetParams:
        """Derive rabbet width and depth."""
        ...

    def dado(
        self,
        host_thickness: float,
        insert_thickness: float | None = None,
        width_override: float | None = None,
        depth_override: float | None = None,
        offset: float | None = None,
        axis: Axis | None = None,
    ) -> DadoParams:
        """Derive dado width, depth, offset and axis."""
        ...

    def groove(
        self,
        host_thickness: float,
        insert_thickness: float | None = None,
        width_override: float | None = None,
        depth_override: float | None = None,
        offset: float | None = None,
        axis: Axis | None = None,
    ) -> GrooveParams:
        """Derive groove width, depth, offset and axis."""
        ...

    def mortise_tenon(
        self,
        leg_thickness: float,
        apron_thickness: float,
        apron_height_class: ApronHeightClass | None = None,
        units: Units | None = None,
        *,
        tenon_thickness: float | None = None,
        tenon_length: float | None = None,
        shoulder: float | None = None,
        haunch: float | None = None,
    ) -> MortiseTenonParams:
        """Derive a matched mortise and tenon."""
        ...


@runtime_checkable
class BooleanBackend(Protocol):
    """Boolean solid-geometry capability used by the solid cut builder.

    Implementations receive closed triangle meshes and return a new mesh;
    inputs must not be modified.

    Example:
        ```python
        class TrimeshBooleanBackend:
            def union(self, a, b):
                return trimesh.boolean.union([a, b], engine="manifold")

            def subtract(self, a, b):
                return trimesh.boolean.difference([a, b], engine="manifold")
        ```
    """

    def union(self, a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
        """Return the union of two solids."""
        ...

    def subtract(self, a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
        """Return ``a`` with ``b`` removed."""
        ...
