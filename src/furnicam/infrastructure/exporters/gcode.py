"""G-code exporter for joinery toolpaths."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from furnicam.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from furnicam.application.dtos import ManufacturingOutput


@ExporterRegistry.register("gcode")
class GcodeExporter:
    """Writes the joinery toolpath program already held by the output.

    Attributes:
        format_name: "gcode"
        file_extension: "nc"
    """

    format_name: ClassVar[str] = "gcode"
    file_extension: ClassVar[str] = "nc"

    def export(self, output: ManufacturingOutput, path: Path) -> None:
        path.write_text(self.export_string(output))

    def export_string(self, output: ManufacturingOutput) -> str:
        return output.gcode
