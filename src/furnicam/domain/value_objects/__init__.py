"""Value objects for the furnicam domain.

This module provides immutable data types used throughout the engine.
All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Units and formatting
from ._units import (
    MM_PER_INCH,
    Units,
    format_length,
    from_mm,
    inches_to,
    round_length,
    to_inches,
    to_mm,
)

# Parts, joins and materials
from ._parts import (
    ApronHeightClass,
    Axis,
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
)

# CAM
from ._cam import MOTION_DEFAULTS, CamJob, Tooling

__all__ = [
    # Units
    "MM_PER_INCH",
    "Units",
    "format_length",
    "from_mm",
    "inches_to",
    "round_length",
    "to_inches",
    "to_mm",
    # Parts
    "ApronHeightClass",
    "Axis",
    "Edge",
    "Fit",
    "Join",
    "JoinType",
    "Material",
    "MortiseTenonOverrides",
    "Overall",
    "Part",
    "Position3D",
    "Tolerances",
    # CAM
    "MOTION_DEFAULTS",
    "CamJob",
    "Tooling",
]
