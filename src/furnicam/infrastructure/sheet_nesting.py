"""Sheet nesting data models and the greedy shelf packer.

This module provides data structures for representing stock sheets,
part placements and nesting results, plus the deterministic shelf
packing algorithm that lays parts onto sheets.

Parts are placed in input order, left to right, wrapping to a new row
when the sheet width runs out and to a new sheet when the height runs
out. There is no rotation and no search: the same input always yields
the same placements.

All dataclasses are frozen (immutable) to ensure thread safety and
hashability. All lengths are millimeters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from furnicam.domain.entities import ProductionSpec
from furnicam.domain.errors import PartTooLarge
from furnicam.domain.value_objects import Part, Units, to_mm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetConfig:
    """Stock sheet dimensions and the gap kept around every part.

    Standard sheet sizes:
    - 1220 x 2440 mm with a 5 mm gap
    - 48" x 96" (4'x8') with a 1/4" gap

    Attributes:
        width: Sheet width in mm.
        height: Sheet height in mm.
        gap: Spacing between parts and from the sheet edges in mm.
        kerf: Saw kerf added to every piece's width and length in mm.
        banding_overhang: Default edge banding allowance per banded edge
            in mm (1 mm, or 1/16" for inch projects).
    """

    width: float = 1220.0
    height: float = 2440.0
    gap: float = 5.0
    kerf: float = 0.0
    banding_overhang: float = 1.0

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Sheet width must be positive")
        if self.height <= 0:
            raise ValueError("Sheet height must be positive")
        if self.gap < 0:
            raise ValueError("Sheet gap must be non-negative")
        if self.kerf < 0:
            raise ValueError("Kerf must be non-negative")
        if self.banding_overhang < 0:
            raise ValueError("Banding overhang must be non-negative")
        if 2 * self.gap >= min(self.width, self.height):
            raise ValueError("Sheet gap leaves no usable area")

    @classmethod
    def for_units(cls, units: Units) -> SheetConfig:
        """Default sheet for a unit system, converted to mm."""
        if units is Units.INCH:
            return cls(
                width=to_mm(48.0, units),
                height=to_mm(96.0, units),
                gap=to_mm(0.25, units),
                banding_overhang=to_mm(1 / 16, units),
            )
        return cls()

    @property
    def usable_width(self) -> float:
        """Widest part that fits between the edge gaps."""
        return self.width - 2 * self.gap

    @property
    def usable_height(self) -> float:
        """Tallest part that fits between the edge gaps."""
        return self.height - 2 * self.gap

    @property
    def area(self) -> float:
        """Sheet area in square mm."""
        return self.width * self.height


@dataclass(frozen=True)
class NestItem:
    """One physical piece to nest.

    Attributes:
        part_id: Id of the cut-list part this piece comes from.
        label: Display label, "Name #k" for copies of multi-quantity parts.
        width: Extent along the sheet X axis (the part's width).
        height: Extent along the sheet Y axis (the part's length).
    """

    part_id: str
    label: str
    width: float
    height: float


@dataclass(frozen=True)
class Placement:
    """A piece placed on a sheet.

    Attributes:
        part_id: Id of the cut-list part.
        label: Display label of the piece.
        sheet_index: 1-based sheet number.
        x: Left edge on the sheet in mm.
        y: Bottom edge on the sheet in mm.
        width: Placed width in mm.
        height: Placed height in mm.
    """

    part_id: str
    label: str
    sheet_index: int
    x: float
    y: float
    width: float
    height: float

    @property
    def right_edge(self) -> float:
        """X coordinate of the piece's right edge."""
        return self.x + self.width

    @property
    def top_edge(self) -> float:
        """Y coordinate of the piece's top edge."""
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class SheetLayout:
    """Placements on a single sheet of one material.

    Attributes:
        sheet_index: 1-based sheet number within its material group.
        sheet: Sheet dimensions.
        material: Material name shared by every piece on the sheet.
        thickness: Stock thickness in mm.
        placements: Pieces on this sheet, in placement order.
    """

    sheet_index: int
    sheet: SheetConfig
    material: str
    thickness: float
    placements: tuple[Placement, ...]

    @property
    def used_area(self) -> float:
        """Total area covered by placed pieces in square mm."""
        return sum(p.area for p in self.placements)

    @property
    def waste_percentage(self) -> float:
        """Percentage of the sheet not covered by pieces."""
        return (1 - self.used_area / self.sheet.area) * 100

    @property
    def piece_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class NestingResult:
    """Sheet layouts for every material group of a spec.

    Attributes:
        layouts: Sheet layouts, grouped by material in first-appearance order.
        sheet_counts: ((material, thickness), sheet count) pairs, in
            layout order.
    """

    layouts: tuple[SheetLayout, ...] = ()
    sheet_counts: tuple[tuple[tuple[str, float], int], ...] = ()

    @property
    def sheets_by_material(self) -> dict[tuple[str, float], int]:
        """Sheet count per (material, thickness)."""
        return dict(self.sheet_counts)

    @property
    def total_sheets(self) -> int:
        """Total number of sheets across all materials."""
        return sum(count for _, count in self.sheet_counts)

    @property
    def placements(self) -> tuple[Placement, ...]:
        """Every placement across all layouts."""
        return tuple(p for layout in self.layouts for p in layout.placements)

    @property
    def total_waste_percentage(self) -> float:
        """Waste across all sheets, weighted by sheet area."""
        total_area = sum(layout.sheet.area for layout in self.layouts)
        if total_area == 0:
            return 0.0
        used = sum(layout.used_area for layout in self.layouts)
        return (1 - used / total_area) * 100


def expand_parts(
    parts: Sequence[Part],
    kerf: float = 0.0,
    banding_overhang: float = 0.0,
) -> list[NestItem]:
    """Expand parts to one nest item per unit of quantity.

    Order is stable by (part index, copy index). Copies of a part with
    quantity > 1 are labelled "Name #1", "Name #2", ...

    Items carry the rough-cut size: edge banding overhang on each banded
    edge, then kerf on both axes.
    """
    items: list[NestItem] = []
    for part in parts:
        width, height = part.cut_size(kerf, banding_overhang)
        for label in part.piece_labels:
            items.append(NestItem(part_id=part.id, label=label, width=width, height=height))
    return items


def nest(
    items: Sequence[NestItem],
    sheet_width: float,
    sheet_height: float,
    gap: float,
) -> tuple[Placement, ...]:
    """Place items on sheets with the greedy shelf heuristic.

    Args:
        items: Pieces to place, in the order they should be laid down.
        sheet_width: Sheet width in mm.
        sheet_height: Sheet height in mm.
        gap: Spacing between pieces and from the sheet edges in mm.

    Returns:
        One placement per item, in input order.

    Raises:
        PartTooLarge: If an item cannot fit on an empty sheet.
    """
    x = y = gap
    row_height = 0.0
    sheet = 1
    placements: list[Placement] = []

    for item in items:
        if item.width > sheet_width - 2 * gap or item.height > sheet_height - 2 * gap:
            raise PartTooLarge(
                item.label,
                item.width,
                item.height,
                f"Part '{item.label}' ({item.width:g}x{item.height:g}) is too large "
                f"for a {sheet_width:g}x{sheet_height:g} sheet with {gap:g} gap",
            )

        if x + item.width + gap > sheet_width:
            x = gap
            y += row_height + gap
            row_height = 0.0

        if y + item.height + gap > sheet_height:
            sheet += 1
            x = y = gap
            row_height = 0.0

        placements.append(
            Placement(
                part_id=item.part_id,
                label=item.label,
                sheet_index=sheet,
                x=x,
                y=y,
                width=item.width,
                height=item.height,
            )
        )
        x += item.width + gap
        row_height = max(row_height, item.height)

    logger.debug("Nested %d pieces onto %d sheets", len(placements), sheet if placements else 0)
    return tuple(placements)


class SheetNester:
    """Greedy shelf nester bound to one sheet configuration.

    Attributes:
        sheet: Sheet dimensions and gap used for every call.
    """

    def __init__(self, sheet: SheetConfig | None = None) -> None:
        self.sheet = sheet or SheetConfig()

    def nest(self, items: Sequence[NestItem]) -> tuple[Placement, ...]:
        """Place items on sheets of the configured size."""
        return nest(items, self.sheet.width, self.sheet.height, self.sheet.gap)

    def nest_parts(self, parts: Sequence[Part]) -> tuple[Placement, ...]:
        """Expand quantities and place every piece."""
        return self.nest(expand_parts(parts, self.sheet.kerf, self.sheet.banding_overhang))


class SheetNestingService:
    """Coordinates nesting across material groups.

    Furniture specs usually mix stock (e.g. 18mm plywood for carcass
    parts, 6mm for backs). This service groups parts by material name and
    thickness, nests each group on its own sheets, and combines the
    results.

    Attributes:
        nester: SheetNester used for every group.
    """

    def __init__(self, nester: SheetNester | None = None) -> None:
        self.nester = nester or SheetNester()

    @property
    def sheet(self) -> SheetConfig:
        return self.nester.sheet

    def nest_spec(self, spec: ProductionSpec) -> NestingResult:
        """Nest every part of ``spec``, one sheet series per material group.

        Raises:
            PartTooLarge: If any piece cannot fit on an empty sheet.
        """
        if not spec.parts:
            return NestingResult()

        groups = self._group_by_material(spec.parts)
        logger.info(
            "Nesting %d pieces across %d material groups",
            spec.total_quantity,
            len(groups),
        )

        layouts: list[SheetLayout] = []
        sheet_counts: list[tuple[tuple[str, float], int]] = []

        for (material, thickness), parts in groups.items():
            placements = self.nester.nest_parts(parts)
            sheet_count = max(p.sheet_index for p in placements)
            for index in range(1, sheet_count + 1):
                layout = SheetLayout(
                    sheet_index=index,
                    sheet=self.sheet,
                    material=material,
                    thickness=thickness,
                    placements=tuple(p for p in placements if p.sheet_index == index),
                )
                layouts.append(layout)
                logger.debug(
                    "%s %gmm sheet %d: %d pieces, %.1f%% waste",
                    material,
                    thickness,
                    index,
                    layout.piece_count,
                    layout.waste_percentage,
                )
            sheet_counts.append(((material, thickness), sheet_count))

        return NestingResult(layouts=tuple(layouts), sheet_counts=tuple(sheet_counts))

    @staticmethod
    def _group_by_material(parts: Sequence[Part]) -> dict[tuple[str, float], list[Part]]:
        """Group parts by (material, thickness), keeping first-appearance order."""
        groups: dict[tuple[str, float], list[Part]] = {}
        for part in parts:
            groups.setdefault((part.material, part.thickness), []).append(part)
        return groups
