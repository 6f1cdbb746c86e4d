"""G-code generation for joinery cuts and cut-list outlines.

Programs are plain ASCII, one command per line, for GRBL-compatible
controllers. Every job is validated before the first line is written,
so a bad job never yields a partial program.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from furnicam.domain.value_objects import (
    CamJob,
    Tooling,
    Units,
    format_length,
    from_mm,
)
from furnicam.infrastructure.sheet_nesting import Placement

logger = logging.getLogger(__name__)


class ToolpathEmitter:
    """Converts CAM jobs and tool parameters into G-code text.

    Each job becomes a single perimeter pass around its cut rectangle at
    full depth: rapid to the start corner, plunge, four linear moves back
    to the start, retract. Coordinates are host-local.

    Attributes:
        include_comments: Emit parenthesized header and per-job comments.
    """

    def __init__(self, include_comments: bool = True) -> None:
        self.include_comments = include_comments

    def emit(self, jobs: Sequence[CamJob], tooling: Tooling, units: Units) -> str:
        """Render joinery jobs as a G-code program.

        Args:
            jobs: Cuts in millimeters, emitted in order.
            tooling: Tool parameters in the output unit.
            units: Output unit; job coordinates are converted to it.

        Returns:
            The program text, newline separated.

        Raises:
            InvalidGeometry: A job has unusable host or cut dimensions.
            MissingRequiredField: A rabbet job has no edge.
        """
        for job in jobs:
            job.validate()
        tooling = tooling.with_defaults(units)

        def fmt(value: float) -> str:
            return format_length(value, units)

        lines = self._header("Joinery toolpaths", tooling, units)

        for number, job in enumerate(jobs, start=1):
            x0, y0, x1, y1 = (from_mm(v, units) for v in job.rectangle())
            depth = from_mm(job.depth, units)
            narrowest = min(x1 - x0, y1 - y0)
            if tooling.endmill_diameter > narrowest:
                logger.warning(
                    "Job %d (%s): endmill %s is wider than the %s cut",
                    number,
                    job.label or job.job_type.value,
                    fmt(tooling.endmill_diameter),
                    fmt(narrowest),
                )

            if self.include_comments:
                placement = (
                    f"edge {job.edge.value}"
                    if job.edge is not None
                    else f"axis {(job.axis.value if job.axis else 'X')}"
                )
                lines.append(
                    f"(Job {number}: {job.job_type.value} {job.label}  {placement}  "
                    f"{fmt(from_mm(job.width, units))} wide x {fmt(depth)} deep)"
                )
            lines.extend(
                self._rectangle(x0, y0, x1, y1, -depth, tooling, fmt)
            )

        lines.append("M2")
        logger.debug("Emitted %d jobs as %d lines of G-code", len(jobs), len(lines))
        return "\n".join(lines) + "\n"

    def emit_cutlist_outlines(
        self,
        placements: Sequence[Placement],
        tooling: Tooling,
        units: Units,
    ) -> str:
        """Render nested parts as sheet-coordinate perimeter profiles.

        Each part is traced once at ``tooling.cut_z``, grouped by sheet.

        Args:
            placements: Nested placements in millimeters.
            tooling: Tool parameters in the output unit.
            units: Output unit.

        Returns:
            The program text, newline separated.
        """
        tooling = tooling.with_defaults(units)
        assert tooling.cut_z is not None

        def fmt(value: float) -> str:
            return format_length(value, units)

        lines = self._header("Cut-list outlines", tooling, units)
        sheets = sorted({p.sheet_index for p in placements})
        for sheet in sheets:
            if self.include_comments:
                lines.append(f"(--- SHEET {sheet} ---)")
            for p in (p for p in placements if p.sheet_index == sheet):
                x0, y0 = from_mm(p.x, units), from_mm(p.y, units)
                x1, y1 = from_mm(p.right_edge, units), from_mm(p.top_edge, units)
                if self.include_comments:
                    lines.append(
                        f"(Part: {p.label}  {fmt(x1 - x0)} x {fmt(y1 - y0)}  "
                        f"@ {fmt(x0)},{fmt(y0)})"
                    )
                lines.extend(self._rectangle(x0, y0, x1, y1, tooling.cut_z, tooling, fmt))

        lines.append("M2")
        return "\n".join(lines) + "\n"

    def _header(self, title: str, tooling: Tooling, units: Units) -> list[str]:
        lines: list[str] = []

        def fmt(value: float | None) -> str:
            return format_length(value or 0.0, units)

        if self.include_comments:
            lines.append(f"({title})")
            lines.append(
                f"(Units: {units.value}, tool: {fmt(tooling.endmill_diameter)}, "
                f"feed: {fmt(tooling.feed_xy)}, plunge: {fmt(tooling.feed_z)}, "
                f"safeZ: {fmt(tooling.safe_z)})"
            )
        lines.append(units.gcode_word)
        lines.append("G90")
        lines.append("G17")
        lines.append(f"G0 Z{fmt(tooling.safe_z)}")
        return lines

    @staticmethod
    def _rectangle(
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        z: float,
        tooling: Tooling,
        fmt: Callable[[float], str],
    ) -> list[str]:
        return [
            f"G0 X{fmt(x0)} Y{fmt(y0)}",
            f"G1 Z{fmt(z)} F{fmt(tooling.feed_z)}",
            f"G1 X{fmt(x1)} Y{fmt(y0)} F{fmt(tooling.feed_xy)}",
            f"G1 X{fmt(x1)} Y{fmt(y1)}",
            f"G1 X{fmt(x0)} Y{fmt(y1)}",
            f"G1 X{fmt(x0)} Y{fmt(y0)}",
            f"G0 Z{fmt(tooling.safe_z)}",
        ]


def emit(jobs: Sequence[CamJob], tooling: Tooling, units: Units) -> str:
    """Render jobs with a default :class:`ToolpathEmitter`."""
    return ToolpathEmitter().emit(jobs, tooling, units)
