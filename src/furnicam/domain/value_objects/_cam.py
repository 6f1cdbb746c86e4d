"""CAM value objects: cutting jobs and tool parameters."""

from __future__ import annotations

from dataclasses import dataclass, replace

from furnicam.domain.errors import InvalidGeometry, MissingRequiredField

from ._parts import Axis, Edge, JoinType
from ._units import Units

# feed_xy, feed_z, safe_z, cut_z per output unit
MOTION_DEFAULTS: dict[Units, tuple[float, float, float, float]] = {
    Units.MM: (1200.0, 300.0, 6.0, -6.0),
    Units.INCH: (60.0, 15.0, 0.25, -0.25),
}


@dataclass(frozen=True)
class Tooling:
    """Endmill and motion parameters, expressed in the G-code output unit.

    Attributes:
        endmill_diameter: Cutter diameter.
        stepdown: Maximum depth per pass.
        stepover: Fraction of the diameter between adjacent passes (0, 1].
        feed_xy: Cutting feed; defaulted per unit when None.
        feed_z: Plunge feed; defaulted per unit when None.
        safe_z: Clearance height for rapids; defaulted per unit when None.
        cut_z: Profile depth used by cut-list outlines; defaulted per unit.
    """

    endmill_diameter: float
    stepdown: float
    stepover: float
    feed_xy: float | None = None
    feed_z: float | None = None
    safe_z: float | None = None
    cut_z: float | None = None

    def __post_init__(self) -> None:
        if self.endmill_diameter <= 0:
            raise InvalidGeometry("endmill_diameter", "must be positive", self.endmill_diameter)
        if self.stepdown <= 0:
            raise InvalidGeometry("stepdown", "must be positive", self.stepdown)
        if not 0 < self.stepover <= 1:
            raise InvalidGeometry(
                "stepover", "must be a fraction of the diameter in (0, 1]", self.stepover
            )
        for name in ("feed_xy", "feed_z", "safe_z"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise InvalidGeometry(name, "must be positive", value)
        if self.cut_z is not None and self.cut_z >= 0:
            raise InvalidGeometry("cut_z", "must be below the stock surface", self.cut_z)

    @classmethod
    def default_for(cls, units: Units) -> Tooling:
        """A 1/4in (6mm) flat endmill with conservative stepdown."""
        if units is Units.INCH:
            return cls(endmill_diameter=0.25, stepdown=0.0625, stepover=0.4)
        return cls(endmill_diameter=6.0, stepdown=2.0, stepover=0.4)

    def with_defaults(self, units: Units) -> Tooling:
        """Return a copy with every unset motion value filled for ``units``."""
        feed_xy, feed_z, safe_z, cut_z = MOTION_DEFAULTS[units]
        return replace(
            self,
            feed_xy=self.feed_xy if self.feed_xy is not None else feed_xy,
            feed_z=self.feed_z if self.feed_z is not None else feed_z,
            safe_z=self.safe_z if self.safe_z is not None else safe_z,
            cut_z=self.cut_z if self.cut_z is not None else cut_z,
        )


@dataclass(frozen=True)
class CamJob:
    """One flat-bottomed rectangular cut on a host part, in millimeters.

    The cut rectangle is expressed in host-local coordinates with the
    origin at the host's bottom-left corner, X along ``host_width`` and
    Y along ``host_length``.

    Attributes:
        job_type: RABBET, DADO or GROOVE.
        host_length: Host extent along Y.
        host_width: Host extent along X.
        width: Cut width across the channel.
        depth: Cut depth below the top face.
        label: Host name used in G-code comments.
        offset: Channel centerline distance from the reference edge
            (Y=0 for axis X, X=0 for axis Y); centered when None.
        axis: Through-cut direction for DADO and GROOVE.
        edge: Host edge for RABBET.
    """

    job_type: JoinType
    host_length: float
    host_width: float
    width: float
    depth: float
    label: str = ""
    offset: float | None = None
    axis: Axis | None = None
    edge: Edge | None = None

    def validate(self) -> None:
        """Check the job can be toolpathed.

        Raises:
            InvalidGeometry: Non-positive dimensions, a mortise-and-tenon
                job, or a rectangle that leaves the host.
            MissingRequiredField: A RABBET without an edge.
        """
        if not self.job_type.is_channel:
            raise InvalidGeometry("job_type", "mortise-and-tenon joints are not toolpathed")
        if self.host_length <= 0:
            raise InvalidGeometry("host_length", f"job '{self.label}' host has no usable length")
        if self.host_width <= 0:
            raise InvalidGeometry("host_width", f"job '{self.label}' host has no usable width")
        if self.width <= 0:
            raise InvalidGeometry("width", "must be positive", self.width)
        if self.depth <= 0:
            raise InvalidGeometry("depth", "must be positive", self.depth)
        if self.job_type is JoinType.RABBET and self.edge is None:
            raise MissingRequiredField("edge", "RABBET jobs need a host edge")

        x0, y0, x1, y1 = self.rectangle()
        if x0 < 0 or y0 < 0 or x1 > self.host_width or y1 > self.host_length:
            field = "width" if self.job_type is JoinType.RABBET else "offset"
            raise InvalidGeometry(field, f"job '{self.label}' cut leaves the host outline")

    def rectangle(self) -> tuple[float, float, float, float]:
        """Return the cut rectangle as (x0, y0, x1, y1) in host-local mm."""
        length, width, w = self.host_length, self.host_width, self.width

        if self.job_type is JoinType.RABBET:
            if self.edge is Edge.N:
                return (0.0, length - w, width, length)
            if self.edge is Edge.S:
                return (0.0, 0.0, width, w)
            if self.edge is Edge.E:
                return (width - w, 0.0, width, length)
            return (0.0, 0.0, w, length)

        if (self.axis or Axis.X) is Axis.X:
            center = self.offset if self.offset is not None else length / 2
            return (0.0, center - w / 2, width, center + w / 2)
        center = self.offset if self.offset is not None else width / 2
        return (center - w / 2, 0.0, center + w / 2, length)
