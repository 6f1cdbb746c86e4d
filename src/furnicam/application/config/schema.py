"""Pydantic models for project configuration files.

A project file holds one production spec (cut list plus joins) and,
optionally, tooling and stock sheet settings. Lengths are written in the
spec's ``units``; conversion to millimeters happens in the adapter.

Keys may be written either in snake_case or in the camelCase used by
exported production specs (``qty``, ``hostPartId``, ``mt``, ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Supported project file versions
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class UnitsConfig(str, Enum):
    """Unit system of every length in the file."""

    MM = "mm"
    INCH = "in"


class JoinTypeConfig(str, Enum):
    """Joint types available in configuration."""

    MORTISE_TENON = "MORTISE_TENON"
    RABBET = "RABBET"
    DADO = "DADO"
    GROOVE = "GROOVE"


class EdgeConfig(str, Enum):
    """Host part edge, origin at the bottom-left corner."""

    N = "N"
    S = "S"
    E = "E"
    W = "W"


class AxisConfig(str, Enum):
    X = "X"
    Y = "Y"


class FitConfig(str, Enum):
    SNUG = "snug"
    STANDARD = "standard"
    LOOSE = "loose"


class ApronHeightClassConfig(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    TALL = "tall"


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class PositionSchema(_Model):
    """Origin of a part in assembly space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class PartSchema(_Model):
    """One cut-list part.

    Attributes:
        id: Unique identifier referenced by joins.
        name: Display name.
        material: Material name; parts are nested per material.
        thickness: Stock thickness (Z).
        length: Length along the part's Y axis.
        width: Width along the part's X axis.
        quantity: Number of copies ("qty").
        notes: Free-form notes.
        position: Optional origin for solid building.
        banded_edges: Edges that get edge banding ("edgeBanding").
        banding_overhang: Banding allowance per banded edge; omitted uses
            the sheet default ("bandingOverhang").
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    material: str = "Plywood"
    thickness: float = Field(..., gt=0)
    length: float = Field(..., gt=0)
    width: float = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1, alias="qty")
    notes: str | None = None
    position: PositionSchema | None = None
    banded_edges: list[EdgeConfig] = Field(default_factory=list, alias="edgeBanding")
    banding_overhang: float | None = Field(default=None, ge=0, alias="bandingOverhang")

    @field_validator("banded_edges")
    @classmethod
    def validate_unique_edges(cls, v: list[EdgeConfig]) -> list[EdgeConfig]:
        if len(set(v)) != len(v):
            raise ValueError("each edge may be banded only once")
        return v


class MortiseTenonSchema(_Model):
    """Mortise-and-tenon overrides; omitted values are derived."""

    tenon_thickness: float | None = Field(default=None, gt=0, alias="tenonThickness")
    tenon_length: float | None = Field(default=None, gt=0, alias="tenonLength")
    shoulder: float | None = Field(default=None, ge=0)
    haunch: float | None = Field(default=None, ge=0)


class JoinSchema(_Model):
    """One declared joint between a host part and an optional insert."""

    join_type: JoinTypeConfig = Field(..., alias="type")
    host_part_id: str = Field(..., min_length=1, alias="hostPartId")
    insert_part_id: str | None = Field(default=None, min_length=1, alias="insertPartId")
    host_edge: EdgeConfig | None = Field(default=None, alias="hostEdge")
    axis: AxisConfig | None = None
    offset: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, gt=0)
    depth: float | None = Field(default=None, gt=0)
    fit: FitConfig = FitConfig.STANDARD
    mortise_tenon: MortiseTenonSchema | None = Field(default=None, alias="mt")
    apron_height_class: ApronHeightClassConfig | None = Field(
        default=None, alias="apronHeightClass"
    )

    @model_validator(mode="after")
    def validate_mortise_tenon_only_fields(self) -> JoinSchema:
        """Mortise-and-tenon settings are rejected on other joint types."""
        if self.join_type != JoinTypeConfig.MORTISE_TENON:
            if self.mortise_tenon is not None:
                raise ValueError("mt overrides are only valid on MORTISE_TENON joins")
            if self.apron_height_class is not None:
                raise ValueError(
                    "apronHeightClass is only valid on MORTISE_TENON joins"
                )
        return self


class ToleranceSchema(_Model):
    """Width allowance per fit class; omitted values use the mm defaults."""

    snug: float | None = Field(default=None, alias="fitSnug")
    standard: float | None = Field(default=None, alias="fitStandard")
    loose: float | None = Field(default=None, alias="fitLoose")


class OverallSchema(_Model):
    """Overall envelope of the piece."""

    width: float = Field(..., gt=0, alias="W")
    depth: float = Field(..., gt=0, alias="D")
    height: float = Field(..., gt=0, alias="H")


class MaterialSchema(_Model):
    name: str = Field(..., min_length=1)
    thickness: float = Field(..., gt=0)


class MetadataSchema(_Model):
    furniture_type: str = Field(default="project", alias="type")
    title: str = "Untitled build"


class ProductionSpecSchema(_Model):
    """Production spec: cut list, joins and shared settings."""

    version: Literal["v1"] = "v1"
    units: UnitsConfig = UnitsConfig.MM
    metadata: MetadataSchema = Field(default_factory=MetadataSchema)
    overall: OverallSchema | None = None
    materials: list[MaterialSchema] = Field(default_factory=list)
    tolerances: ToleranceSchema = Field(default_factory=ToleranceSchema)
    apron_height_class: ApronHeightClassConfig = Field(
        default=ApronHeightClassConfig.MEDIUM, alias="apronHeightClass"
    )
    parts: list[PartSchema] = Field(..., min_length=1, alias="cutlist")
    joins: list[JoinSchema] = Field(default_factory=list)


class ToolingSchema(_Model):
    """Router tooling, in the spec's units; omitted values use unit defaults."""

    endmill_diameter: float | None = Field(default=None, gt=0, alias="endmillDiameter")
    stepdown: float | None = Field(default=None, gt=0)
    stepover: float | None = Field(default=None, gt=0, le=1)
    feed_xy: float | None = Field(default=None, gt=0, alias="feedXY")
    feed_z: float | None = Field(default=None, gt=0, alias="feedZ")
    safe_z: float | None = Field(default=None, alias="safeZ")
    cut_z: float | None = Field(default=None, lt=0, alias="cutZ")


class SheetSchema(_Model):
    """Stock sheet size, part gap and cut allowances, in the spec's units."""

    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    gap: float | None = Field(default=None, ge=0)
    kerf: float | None = Field(default=None, ge=0)
    banding_overhang: float | None = Field(default=None, ge=0, alias="bandingOverhang")


class ProjectConfiguration(_Model):
    """Root model of a project file.

    Attributes:
        schema_version: File format version ("major.minor").
        spec: The production spec.
        tooling: Optional tooling settings.
        sheet: Optional stock sheet settings.

    Example:
        >>> config = ProjectConfiguration.model_validate({
        ...     "schema_version": "1.0",
        ...     "spec": {"cutlist": [{"id": "a", "name": "A", "thickness": 18,
        ...                           "length": 500, "width": 300}]},
        ... })
    """

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$", alias="schemaVersion")
    spec: ProductionSpecSchema
    tooling: ToolingSchema | None = None
    sheet: SheetSchema | None = None

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v
        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v
        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )
