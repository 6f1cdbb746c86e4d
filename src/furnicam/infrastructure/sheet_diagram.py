"""SVG sheet diagrams for nested cut lists."""

from __future__ import annotations

from html import escape

from furnicam.domain.value_objects import Units, format_length, from_mm
from furnicam.infrastructure.sheet_nesting import NestingResult, Placement, SheetLayout


class SheetDiagramRenderer:
    """Renders nested sheet layouts as SVG.

    Sheet coordinates have their origin at the bottom-left corner; SVG
    coordinates grow downward, so Y is flipped when drawing.

    Attributes:
        scale: Pixels per millimeter.
        units: Unit used for dimension text.
        piece_fill: Fill color for placed pieces.
        piece_stroke: Stroke color for outlines.
        show_dimensions: Whether to print piece dimensions.
    """

    header_height = 30
    sheet_spacing = 20

    def __init__(
        self,
        scale: float = 0.5,
        units: Units = Units.MM,
        piece_fill: str = "#ADD8E6",  # Light blue
        piece_stroke: str = "#000000",
        show_dimensions: bool = True,
    ) -> None:
        self.scale = scale
        self.units = units
        self.piece_fill = piece_fill
        self.piece_stroke = piece_stroke
        self.show_dimensions = show_dimensions

    def render_sheet(self, layout: SheetLayout, y_offset: float = 0.0) -> list[str]:
        """SVG elements for one sheet, drawn ``y_offset`` pixels down."""
        sheet = layout.sheet
        svg_width = sheet.width * self.scale
        sheet_height = sheet.height * self.scale
        top = y_offset + self.header_height

        header = (
            f"Sheet {layout.sheet_index} - {layout.material} "
            f"{format_length(from_mm(layout.thickness, self.units), self.units)}"
            f"{self.units.value} - {layout.piece_count} pieces, "
            f"{layout.waste_percentage:.1f}% waste"
        )
        parts = [
            f'  <text x="10" y="{top - 8}" font-family="Arial, sans-serif" '
            f'font-size="14">{escape(header)}</text>',
            f'  <rect x="0" y="{top}" width="{svg_width}" height="{sheet_height}" '
            f'fill="#f5deb3" stroke="{self.piece_stroke}" stroke-width="2"/>',
        ]
        for placement in layout.placements:
            parts.append(self._render_piece(placement, top, sheet_height))
        return parts

    def render(self, result: NestingResult) -> str:
        """Single SVG with every sheet stacked vertically."""
        if not result.layouts:
            return (
                '<svg width="100" height="50" xmlns="http://www.w3.org/2000/svg">'
                '<text x="10" y="30">No sheets to display</text></svg>'
            )

        svg_width = max(layout.sheet.width for layout in result.layouts) * self.scale
        svg_height = sum(
            layout.sheet.height * self.scale + self.header_height + self.sheet_spacing
            for layout in result.layouts
        )
        parts = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" '
            f'fill="white"/>',
        ]

        y_offset = 0.0
        for layout in result.layouts:
            parts.append(f"  <!-- {escape(layout.material)} sheet {layout.sheet_index} -->")
            parts.extend(self.render_sheet(layout, y_offset))
            y_offset += (
                layout.sheet.height * self.scale + self.header_height + self.sheet_spacing
            )

        parts.append("</svg>")
        return "\n".join(parts)

    def _render_piece(self, placement: Placement, top: float, sheet_height: float) -> str:
        x = placement.x * self.scale
        y = top + sheet_height - placement.top_edge * self.scale
        w = placement.width * self.scale
        h = placement.height * self.scale

        rect = (
            f'    <rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{self.piece_fill}" stroke="{self.piece_stroke}"/>'
        )
        font_size = min(12, min(w, h) / 6)
        if font_size < 6:
            # Too small for text
            return f"  <g>\n{rect}\n  </g>"

        text_x = x + w / 2
        text_y = y + h / 2
        svg_parts = [
            "  <g>",
            rect,
            f'    <text x="{text_x}" y="{text_y - font_size / 2}" '
            f'text-anchor="middle" font-family="Arial, sans-serif" '
            f'font-size="{font_size}">{escape(placement.label)}</text>',
        ]
        if self.show_dimensions:
            dims = (
                f"{format_length(from_mm(placement.width, self.units), self.units)} x "
                f"{format_length(from_mm(placement.height, self.units), self.units)}"
            )
            svg_parts.append(
                f'    <text x="{text_x}" y="{text_y + font_size / 2 + 2}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size * 0.8}">{dims}</text>'
            )
        svg_parts.append("  </g>")
        return "\n".join(svg_parts)
