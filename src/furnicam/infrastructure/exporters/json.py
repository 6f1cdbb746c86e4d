"""JSON exporter for resolved joinery and sheet layouts.

Every length is reported in the unit the spec was authored in, rounded
to that unit's precision (3 decimals for mm, 4 for inches).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from furnicam import __version__
from furnicam.domain.value_objects import Units, from_mm, round_length
from furnicam.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from furnicam.application.dtos import ManufacturingOutput


def _length(value: float, units: Units) -> float:
    return round_length(from_mm(value, units), units)


def _convert_lengths(data: Any, units: Units) -> Any:
    """Convert every float in a nested structure from mm to ``units``."""
    if isinstance(data, dict):
        return {key: _convert_lengths(value, units) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_convert_lengths(value, units) for value in data]
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return _length(data, units)
    return data


@ExporterRegistry.register("json")
class JsonExporter:
    """Exports parts, resolved joints, CAM jobs and nesting as JSON.

    Attributes:
        format_name: "json"
        file_extension: "json"
        indent: JSON indentation level.
    """

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def export(self, output: ManufacturingOutput, path: Path) -> None:
        path.write_text(self.export_string(output))

    def export_string(self, output: ManufacturingOutput) -> str:
        return json.dumps(self.build(output), indent=self.indent)

    def build(self, output: ManufacturingOutput) -> dict[str, Any]:
        """Build the JSON-ready dictionary."""
        units = output.units
        spec = output.spec
        nesting = output.nesting

        parts = [
            {
                "id": part.id,
                "name": part.name,
                "material": part.material,
                "quantity": part.quantity,
                "thickness": _length(part.thickness, units),
                "length": _length(part.length, units),
                "width": _length(part.width, units),
                "banded_edges": [edge.value for edge in part.banded_edges],
            }
            for part in spec.parts
        ]

        sheets = [
            {
                "sheet_index": layout.sheet_index,
                "material": layout.material,
                "thickness": _length(layout.thickness, units),
                "waste_percentage": round(layout.waste_percentage, 1),
                "placements": [
                    {
                        "part_id": placement.part_id,
                        "label": placement.label,
                        "x": _length(placement.x, units),
                        "y": _length(placement.y, units),
                        "width": _length(placement.width, units),
                        "height": _length(placement.height, units),
                    }
                    for placement in layout.placements
                ],
            }
            for layout in nesting.layouts
        ]

        jobs = [
            {
                "type": job.job_type.value,
                "label": job.label,
                "width": _length(job.width, units),
                "depth": _length(job.depth, units),
                "edge": job.edge.value if job.edge else None,
                "axis": job.axis.value if job.axis else None,
                "offset": _length(job.offset, units) if job.offset is not None else None,
            }
            for job in output.jobs
        ]

        return {
            "version": __version__,
            "title": spec.title,
            "units": units.value,
            "parts": parts,
            "joints": [
                {**joint.to_dict(), "params": _convert_lengths(joint.params.to_dict(), units)}
                for joint in output.joints
            ],
            "cam_jobs": jobs,
            "nesting": {
                "sheet": {
                    "width": _length(output.sheet.width, units),
                    "height": _length(output.sheet.height, units),
                    "gap": _length(output.sheet.gap, units),
                    "kerf": _length(output.sheet.kerf, units),
                },
                "total_sheets": nesting.total_sheets,
                "total_waste_percentage": round(nesting.total_waste_percentage, 1),
                "sheets": sheets,
            },
        }
