"""STL export functionality using numpy-stl."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import trimesh
from stl import mesh

from furnicam.infrastructure.solid_cuts import CutSolid


class StlMeshBuilder:
    """Builds numpy-stl meshes from cut solids.

    Coordinate System Transformation:
    The engine uses Z-up coordinates (X = width, Y = length, Z = thickness),
    common in CAD. Many STL viewers use Y-up, so this builder swaps Y and Z:
    - x' = x
    - y' = z
    - z' = y
    The swap is a reflection, so triangle winding is reversed to keep
    normals pointing outward.
    """

    def build_solid_mesh(self, solid: trimesh.Trimesh) -> mesh.Mesh:
        """Convert a trimesh solid to a Y-up numpy-stl mesh."""
        triangles = np.asarray(solid.triangles, dtype=np.float64)
        stl_mesh = mesh.Mesh(np.zeros(len(triangles), dtype=mesh.Mesh.dtype))
        if len(triangles):
            swapped = triangles[:, :, [0, 2, 1]]
            stl_mesh.vectors[:] = swapped[:, ::-1, :]
        return stl_mesh

    def combine_meshes(self, meshes: list[mesh.Mesh]) -> mesh.Mesh:
        """Combine multiple meshes into a single mesh.

        Args:
            meshes: List of meshes to combine.

        Returns:
            A single combined mesh containing all faces.
        """
        if not meshes:
            return mesh.Mesh(np.zeros(0, dtype=mesh.Mesh.dtype))

        total_faces = sum(m.vectors.shape[0] for m in meshes)
        combined = mesh.Mesh(np.zeros(total_faces, dtype=mesh.Mesh.dtype))

        offset = 0
        for m in meshes:
            num_faces = m.vectors.shape[0]
            combined.vectors[offset : offset + num_faces] = m.vectors
            offset += num_faces

        return combined


class StlExporter:
    """Exports cut solids to a single STL file.

    Attributes:
        mesh_builder: Converts solids to numpy-stl meshes.
    """

    def __init__(self, mesh_builder: StlMeshBuilder | None = None) -> None:
        self.mesh_builder = mesh_builder or StlMeshBuilder()

    def build_mesh(
        self, solids: Sequence[CutSolid], include_tenons: bool = True
    ) -> mesh.Mesh:
        """Combine every solid into one mesh."""
        meshes = [
            self.mesh_builder.build_solid_mesh(solid.mesh)
            for solid in solids
            if include_tenons or solid.kind == "part"
        ]
        return self.mesh_builder.combine_meshes(meshes)

    def export(
        self,
        solids: Sequence[CutSolid],
        path: Path,
        include_tenons: bool = True,
    ) -> None:
        """Write the combined solids to ``path`` as binary STL."""
        self.build_mesh(solids, include_tenons).save(str(path))
