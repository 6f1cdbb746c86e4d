"""DXF format exporter for nested sheet layouts.

Generates a 2D DXF file (R2010 format) with every nested sheet laid out
left to right: sheet borders, part outlines, joinery cut rectangles and
labels. Coordinates are millimeters.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, cast

import ezdxf

from furnicam.domain.services.joinery import cam_job_for
from furnicam.domain.value_objects import CamJob, Units, format_length
from furnicam.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

    from furnicam.application.dtos import ManufacturingOutput
    from furnicam.infrastructure.sheet_nesting import Placement, SheetLayout


logger = logging.getLogger(__name__)


# Layer configuration for DXF output
LAYERS = {
    "SHEET": {"color": 8},  # Gray - stock sheet borders
    "OUTLINE": {"color": 7},  # White - part outlines
    "JOINERY": {"color": 1},  # Red - rabbet, dado and groove cuts
    "LABELS": {"color": 5},  # Blue - text labels
}


@ExporterRegistry.register("dxf")
class DxfExporter:
    """Exports nested sheets to DXF for CNC machining.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
        sheet_spacing: Gap (mm) between consecutive sheets in the drawing.
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"

    def __init__(self, sheet_spacing: float = 100.0) -> None:
        self.sheet_spacing = sheet_spacing

    def export(self, output: ManufacturingOutput, path: Path) -> None:
        doc = self.build_document(output)
        doc.saveas(path)
        logger.info(f"Exported DXF to {path}")

    def export_string(self, output: ManufacturingOutput) -> str:
        doc = self.build_document(output)
        stream = StringIO()
        doc.write(stream)
        return stream.getvalue()

    def build_document(self, output: ManufacturingOutput) -> Drawing:
        """Create a DXF document with every sheet drawn."""
        doc = ezdxf.new("R2010")
        for name, props in LAYERS.items():
            doc.layers.add(name, color=cast(int, props["color"]))

        msp = doc.modelspace()
        jobs_by_host: dict[str, list[CamJob]] = {}
        for joint in output.joints:
            job = cam_job_for(joint)
            if job is not None:
                jobs_by_host.setdefault(joint.host.id, []).append(job)

        if not output.nesting.layouts:
            logger.warning("No nested sheets to export")

        x_offset = 0.0
        for layout in output.nesting.layouts:
            self._draw_sheet(msp, layout, x_offset, jobs_by_host)
            x_offset += layout.sheet.width + self.sheet_spacing
        return doc

    def _draw_sheet(
        self,
        msp: Modelspace,
        layout: SheetLayout,
        x_offset: float,
        jobs_by_host: dict[str, list[CamJob]],
    ) -> None:
        sheet = layout.sheet
        self._draw_rect(msp, x_offset, 0.0, x_offset + sheet.width, sheet.height, "SHEET")
        for placement in layout.placements:
            x0 = x_offset + placement.x
            y0 = placement.y
            self._draw_rect(
                msp, x0, y0, x0 + placement.width, y0 + placement.height, "OUTLINE"
            )
            for job in jobs_by_host.get(placement.part_id, []):
                jx0, jy0, jx1, jy1 = job.rectangle()
                self._draw_rect(msp, x0 + jx0, y0 + jy0, x0 + jx1, y0 + jy1, "JOINERY")
            self._draw_label(msp, placement, x0, y0)

    def _draw_rect(
        self,
        msp: Modelspace,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        layer: str,
    ) -> None:
        points = [(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)]
        msp.add_lwpolyline(points, dxfattribs={"layer": layer})

    def _draw_label(
        self, msp: Modelspace, placement: Placement, x: float, y: float
    ) -> None:
        dims = (
            f"{format_length(placement.width, Units.MM)} x "
            f"{format_length(placement.height, Units.MM)} mm"
        )
        # 8% of the smaller side, between 4 and 25 mm
        text_height = max(4.0, min(25.0, min(placement.width, placement.height) * 0.08))
        msp.add_mtext(
            f"{placement.label}\n{dims}",
            dxfattribs={
                "layer": "LABELS",
                "char_height": text_height,
                "insert": (x + placement.width / 2, y + placement.height / 2),
                "attachment_point": 5,  # MIDDLE_CENTER
            },
        )


__all__ = ["DxfExporter", "LAYERS"]
