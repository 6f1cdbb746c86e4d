"""SVG exporter for nested sheet diagrams."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from furnicam.infrastructure.exporters.base import ExporterRegistry
from furnicam.infrastructure.sheet_diagram import SheetDiagramRenderer

if TYPE_CHECKING:
    from furnicam.application.dtos import ManufacturingOutput


@ExporterRegistry.register("svg")
class SvgExporter:
    """SVG exporter for sheet layouts.

    Draws every nested sheet, stacked vertically, with each placed piece
    labeled and dimensioned in the spec's unit.

    Attributes:
        format_name: "svg"
        file_extension: "svg"
    """

    format_name: ClassVar[str] = "svg"
    file_extension: ClassVar[str] = "svg"

    def __init__(self, scale: float = 0.5, show_dimensions: bool = True) -> None:
        """Initialize the SVG exporter.

        Args:
            scale: Pixels per millimeter (default 0.5).
            show_dimensions: Whether to show piece dimensions (default True).
        """
        self.scale = scale
        self.show_dimensions = show_dimensions

    def export(self, output: ManufacturingOutput, path: Path) -> None:
        path.write_text(self.export_string(output))

    def export_string(self, output: ManufacturingOutput) -> str:
        renderer = SheetDiagramRenderer(
            scale=self.scale,
            units=output.units,
            show_dimensions=self.show_dimensions,
        )
        return renderer.render(output.nesting)
