"""STL format exporter for cut solids."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from furnicam.infrastructure.exporters.base import ExporterRegistry
from furnicam.infrastructure.stl_exporter import StlExporter as StlExporterImpl
from furnicam.infrastructure.stl_exporter import StlMeshBuilder

if TYPE_CHECKING:
    from furnicam.application.dtos import ManufacturingOutput


@ExporterRegistry.register("stl")
class StlSolidsExporter:
    """Exports cut solids to STL for 3D preview.

    Wraps the StlExporter implementation to conform to the Exporter
    protocol. Requires the output to have been built with solids.

    Attributes:
        format_name: "stl"
        file_extension: "stl"
        requires_solids: True
    """

    format_name: ClassVar[str] = "stl"
    file_extension: ClassVar[str] = "stl"
    requires_solids: ClassVar[bool] = True

    def __init__(
        self,
        mesh_builder: StlMeshBuilder | None = None,
        include_tenons: bool = True,
    ) -> None:
        """Initialize the STL exporter.

        Args:
            mesh_builder: Optional mesh builder for dependency injection.
            include_tenons: Whether tenon solids are written (default True).
        """
        self._exporter = StlExporterImpl(mesh_builder=mesh_builder)
        self._include_tenons = include_tenons

    def export(self, output: ManufacturingOutput, path: Path) -> None:
        """Export the output's cut solids to an STL file.

        Raises:
            ValueError: If the output carries no solids.
        """
        if not output.solids:
            raise ValueError(
                "STL export requires cut solids. "
                "Build the output with solids enabled."
            )
        self._exporter.export(output.solids, path, include_tenons=self._include_tenons)

    def export_string(self, output: ManufacturingOutput) -> str:
        """STL is written as binary and cannot be exported as a string.

        Raises:
            NotImplementedError: Always.
        """
        raise NotImplementedError(
            "STL format does not support string export. "
            "Use export() to write to a file instead."
        )
