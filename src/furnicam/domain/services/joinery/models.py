"""Joinery data models.

This module provides dataclasses for:
- RabbetParams: Derived rabbet width and depth
- DadoParams / GrooveParams: Derived channel width, depth, offset and axis
- MortiseParams / TenonParams / MortiseTenonParams: Mortise-and-tenon pair
- ResolvedJoint: A declared join bound to its parts and derived parameters
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from furnicam.domain.value_objects import Axis, Join, JoinType, Part, Units


@dataclass(frozen=True)
class RabbetParams:
    """Rabbet dimensions: width across the edge, depth below the face."""

    width: float
    depth: float

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width, "depth": self.depth}


@dataclass(frozen=True)
class DadoParams:
    """Dado dimensions and placement.

    Attributes:
        width: Channel width.
        depth: Channel depth below the top face.
        offset: Centerline distance from the reference edge; None centers it.
        axis: Direction the channel runs across the host.
    """

    width: float
    depth: float
    offset: float | None = None
    axis: Axis = Axis.X

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "depth": self.depth,
            "offset": self.offset,
            "axis": self.axis.value,
        }


@dataclass(frozen=True)
class GrooveParams(DadoParams):
    """Groove dimensions. Same math as a dado, cut with the grain."""


@dataclass(frozen=True)
class MortiseParams:
    """Mortise pocket: width across the leg, height along it, depth into it."""

    width: float
    height: float
    depth: float


@dataclass(frozen=True)
class TenonParams:
    """Tenon tongue on the apron end."""

    thickness: float
    length: float
    width: float
    shoulders: float
    haunch: float | None = None


@dataclass(frozen=True)
class MortiseTenonParams:
    """Matched mortise and tenon, in one unit."""

    mortise: MortiseParams
    tenon: TenonParams
    units: Units = Units.MM

    def to_dict(self) -> dict[str, Any]:
        return {
            "mortise": {
                "width": self.mortise.width,
                "height": self.mortise.height,
                "depth": self.mortise.depth,
            },
            "tenon": {
                "thickness": self.tenon.thickness,
                "length": self.tenon.length,
                "width": self.tenon.width,
                "shoulders": self.tenon.shoulders,
                "haunch": self.tenon.haunch,
            },
        }


JointParams = Union[RabbetParams, DadoParams, GrooveParams, MortiseTenonParams]


@dataclass(frozen=True)
class ResolvedJoint:
    """A join with its host and insert parts and derived parameters (mm).

    Attributes:
        join: The declared join.
        host: Host part (the part that is cut).
        insert: Mating part, if any.
        params: Derived dimensions in millimeters.
    """

    join: Join
    host: Part
    insert: Part | None
    params: JointParams

    @property
    def join_type(self) -> JoinType:
        return self.join.join_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.join.join_type.value,
            "host_part_id": self.host.id,
            "insert_part_id": self.insert.id if self.insert else None,
            "host_edge": self.join.host_edge.value if self.join.host_edge else None,
            "fit": self.join.fit.value,
            "params": self.params.to_dict(),
        }
