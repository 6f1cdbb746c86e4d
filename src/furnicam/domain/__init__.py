"""Domain layer: parts, joins, production specs and joinery rules."""

from furnicam.domain.entities import ProductionSpec
from furnicam.domain.errors import (
    DanglingReference,
    FurnicamError,
    InvalidGeometry,
    MissingRequiredField,
    PartTooLarge,
)
from furnicam.domain.value_objects import (
    ApronHeightClass,
    Axis,
    CamJob,
    Edge,
    Fit,
    Join,
    JoinType,
    Material,
    MortiseTenonOverrides,
    Overall,
    Part,
    Position3D,
    Tolerances,
    Tooling,
    Units,
)

__all__ = [
    "ApronHeightClass",
    "Axis",
    "CamJob",
    "DanglingReference",
    "Edge",
    "Fit",
    "FurnicamError",
    "InvalidGeometry",
    "Join",
    "JoinType",
    "Material",
    "MissingRequiredField",
    "MortiseTenonOverrides",
    "Overall",
    "Part",
    "PartTooLarge",
    "Position3D",
    "ProductionSpec",
    "Tolerances",
    "Tooling",
    "Units",
]
