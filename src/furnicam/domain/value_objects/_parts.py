"""Part, join and material value objects.

All lengths are millimeters. Inch input is converted by the config
adapter before any of these objects are built.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from furnicam.domain.errors import InvalidGeometry, MissingRequiredField


class JoinType(str, Enum):
    """Kinds of joint the engine can dimension."""

    MORTISE_TENON = "MORTISE_TENON"
    RABBET = "RABBET"
    DADO = "DADO"
    GROOVE = "GROOVE"

    @property
    def is_channel(self) -> bool:
        """True for joints cut as a flat-bottomed channel (toolpathed)."""
        return self is not JoinType.MORTISE_TENON


class Edge(str, Enum):
    """Host part edge, in host-local coordinates (Y up, X right)."""

    N = "N"
    S = "S"
    E = "E"
    W = "W"


class Axis(str, Enum):
    """Direction a through-cut runs across the host."""

    X = "X"
    Y = "Y"


class Fit(str, Enum):
    """Fit class selecting a width allowance from the spec tolerances."""

    SNUG = "snug"
    STANDARD = "standard"
    LOOSE = "loose"


class ApronHeightClass(str, Enum):
    """Nominal apron height class used for mortise sizing."""

    SHORT = "short"
    MEDIUM = "medium"
    TALL = "tall"


@dataclass(frozen=True)
class Position3D:
    """Origin of a part's local frame in assembly space."""

    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Material:
    """Named sheet material with a nominal thickness."""

    name: str
    thickness: float

    def __post_init__(self) -> None:
        if self.thickness <= 0:
            raise InvalidGeometry("thickness", "material thickness must be positive", self.thickness)


@dataclass(frozen=True)
class Overall:
    """Overall assembly envelope (W x D x H)."""

    width: float
    depth: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.depth <= 0 or self.height <= 0:
            raise InvalidGeometry("overall", "overall dimensions must be positive")


@dataclass(frozen=True)
class Tolerances:
    """Width allowance per fit class, in millimeters.

    Negative values tighten the fit, positive values loosen it.
    """

    snug: float = -0.10
    standard: float = 0.0
    loose: float = 0.20

    def allowance(self, fit: Fit) -> float:
        """Return the width allowance for a fit class."""
        return {
            Fit.SNUG: self.snug,
            Fit.STANDARD: self.standard,
            Fit.LOOSE: self.loose,
        }[fit]


@dataclass(frozen=True)
class Part:
    """A rectangular solid part from the cut list.

    Attributes:
        id: Unique identifier referenced by joins.
        name: Human-readable name.
        thickness: Stock thickness (Z) in mm.
        length: Length along the part's Y axis in mm.
        width: Width along the part's X axis in mm.
        quantity: Number of identical copies to cut.
        material: Material name; parts are nested per material.
        notes: Free-form notes carried through to reports.
        position: Optional origin in assembly space for solid building.
        banded_edges: Edges that get edge banding; N/S add to the cut
            length, E/W to the cut width.
        banding_overhang: Banding allowance per banded edge in mm; None
            uses the sheet default.
    """

    id: str
    name: str
    thickness: float
    length: float
    width: float
    quantity: int = 1
    material: str = "Plywood"
    notes: str | None = None
    position: Position3D | None = None
    banded_edges: tuple[Edge, ...] = ()
    banding_overhang: float | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise MissingRequiredField("id", "part id must not be empty")
        for name in ("thickness", "length", "width"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidGeometry(name, f"part '{self.id}' {name} must be positive", value)
        if self.quantity < 1:
            raise InvalidGeometry("quantity", f"part '{self.id}' quantity must be at least 1")
        if len(set(self.banded_edges)) != len(self.banded_edges):
            raise ValueError(f"part '{self.id}' lists a banded edge twice")
        if self.banding_overhang is not None and self.banding_overhang < 0:
            raise InvalidGeometry(
                "banding_overhang",
                f"part '{self.id}' banding overhang must be non-negative",
                self.banding_overhang,
            )

    @property
    def piece_labels(self) -> list[str]:
        """One label per physical piece: the name, or "Name #k" for copies."""
        if self.quantity == 1:
            return [self.name]
        return [f"{self.name} #{i + 1}" for i in range(self.quantity)]

    def cut_size(self, kerf: float = 0.0, banding_overhang: float = 0.0) -> tuple[float, float]:
        """Rough-cut (width, length) with kerf and edge banding allowances.

        ``banding_overhang`` applies to banded edges unless the part
        declares its own.
        """
        overhang = banding_overhang if self.banding_overhang is None else self.banding_overhang
        across = sum(1 for edge in self.banded_edges if edge in (Edge.E, Edge.W))
        along = len(self.banded_edges) - across
        return (
            self.width + kerf + across * overhang,
            self.length + kerf + along * overhang,
        )


@dataclass(frozen=True)
class MortiseTenonOverrides:
    """Declared mortise-and-tenon dimensions that replace derived ones."""

    tenon_thickness: float | None = None
    tenon_length: float | None = None
    shoulder: float | None = None
    haunch: float | None = None

    def __post_init__(self) -> None:
        if self.tenon_thickness is not None and self.tenon_thickness <= 0:
            raise InvalidGeometry("tenon_thickness", "must be positive", self.tenon_thickness)
        if self.tenon_length is not None and self.tenon_length <= 0:
            raise InvalidGeometry("tenon_length", "must be positive", self.tenon_length)
        if self.shoulder is not None and self.shoulder < 0:
            raise InvalidGeometry("shoulder", "must be non-negative", self.shoulder)
        if self.haunch is not None and self.haunch < 0:
            raise InvalidGeometry("haunch", "must be non-negative", self.haunch)


@dataclass(frozen=True)
class Join:
    """A declared joint between a host part and an optional insert part.

    RABBET and MORTISE_TENON need an insert; RABBET also needs the host
    edge it runs along. DADO and GROOVE default to the X axis.
    Mortise-and-tenon joints default to the host's E edge.
    """

    join_type: JoinType
    host_part_id: str
    insert_part_id: str | None = None
    host_edge: Edge | None = None
    axis: Axis | None = None
    offset: float | None = None
    width: float | None = None
    depth: float | None = None
    fit: Fit = Fit.STANDARD
    mortise_tenon: MortiseTenonOverrides | None = None
    apron_height_class: ApronHeightClass | None = None

    def __post_init__(self) -> None:
        if not self.host_part_id:
            raise MissingRequiredField("host_part_id")
        if self.join_type in (JoinType.RABBET, JoinType.MORTISE_TENON) and not self.insert_part_id:
            raise MissingRequiredField(
                "insert_part_id", f"{self.join_type.value} joins need an insert part"
            )
        if self.join_type is JoinType.RABBET and self.host_edge is None:
            raise MissingRequiredField("host_edge", "RABBET joins need a host edge")
        if self.width is not None and self.width <= 0:
            raise InvalidGeometry("width", "must be positive", self.width)
        if self.depth is not None and self.depth <= 0:
            raise InvalidGeometry("depth", "must be positive", self.depth)
        if self.offset is not None and self.offset < 0:
            raise InvalidGeometry("offset", "must be non-negative", self.offset)

    @property
    def resolved_axis(self) -> Axis:
        """Cut axis, defaulting to X."""
        return self.axis or Axis.X

    @property
    def resolved_edge(self) -> Edge:
        """Host edge, defaulting to E (used by mortise-and-tenon joins)."""
        return self.host_edge or Edge.E
