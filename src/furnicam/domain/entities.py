"""Domain entities for the furnicam engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from furnicam.domain.errors import DanglingReference, InvalidGeometry
from furnicam.domain.value_objects import (
    ApronHeightClass,
    Join,
    Material,
    Overall,
    Part,
    Tolerances,
    Units,
)


@dataclass(frozen=True)
class ProductionSpec:
    """Normalized production spec: a cut list plus declared joins.

    All lengths are millimeters. ``units`` records the unit the spec was
    authored in; outputs meant for people or machines are rendered back
    into it. The spec is immutable and hashable so derived geometry can
    be memoized on it.

    Attributes:
        parts: Cut list, in declaration order.
        joins: Declared joints between parts.
        units: Unit the spec was authored in.
        title: Display title.
        furniture_type: Free-form furniture category (e.g. "table").
        overall: Overall envelope, if declared.
        materials: Declared sheet materials.
        tolerances: Width allowances per fit class.
        apron_height_class: Default apron class for mortise sizing.

    Raises:
        InvalidGeometry: If two parts share an id.
        DanglingReference: If a join names an unknown part id.
    """

    parts: tuple[Part, ...]
    joins: tuple[Join, ...] = ()
    units: Units = Units.MM
    title: str = ""
    furniture_type: str = ""
    overall: Overall | None = None
    materials: tuple[Material, ...] = ()
    tolerances: Tolerances = field(default_factory=Tolerances)
    apron_height_class: ApronHeightClass = ApronHeightClass.MEDIUM

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for part in self.parts:
            if part.id in seen:
                raise InvalidGeometry("id", f"duplicate part id '{part.id}'")
            seen.add(part.id)
        self.validate_references(self.joins)

    def part_by_id(self, part_id: str, field: str = "part_id") -> Part:
        """Look up a part by id.

        Raises:
            DanglingReference: If no part has that id.
        """
        for part in self.parts:
            if part.id == part_id:
                return part
        raise DanglingReference(part_id, field)

    def validate_references(self, joins: tuple[Join, ...] | list[Join]) -> None:
        """Check that every host and insert id names a part in the cut list."""
        ids = {part.id for part in self.parts}
        for join in joins:
            if join.host_part_id not in ids:
                raise DanglingReference(join.host_part_id, "host_part_id")
            if join.insert_part_id is not None and join.insert_part_id not in ids:
                raise DanglingReference(join.insert_part_id, "insert_part_id")

    @property
    def total_quantity(self) -> int:
        """Number of physical pieces across the cut list."""
        return sum(part.quantity for part in self.parts)
