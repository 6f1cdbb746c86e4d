"""Default joinery rules.

Pure functions deriving fabricable rabbet, dado, groove and
mortise-and-tenon dimensions from nominal part thickness. A rule either
returns dimensions that satisfy the fit ceilings or raises; it never
clamps a declared value past a ceiling.

``DefaultJoineryRules`` is the single implementation of the
``JoineryRules`` protocol. The module-level ``derive_*`` functions use a
shared instance built with the default configuration.
"""

from __future__ import annotations

import logging

from furnicam.domain.errors import InvalidGeometry, MissingRequiredField
from furnicam.domain.value_objects import (
    ApronHeightClass,
    Axis,
    Units,
    inches_to,
    round_length,
    to_inches,
)

from .config import JoineryConfig
from .models import (
    DadoParams,
    GrooveParams,
    MortiseParams,
    MortiseTenonParams,
    RabbetParams,
    TenonParams,
)

logger = logging.getLogger(__name__)

# Tolerance for comparing derived and declared lengths
_EPSILON = 1e-9


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _require_positive(field: str, value: float) -> None:
    if value <= 0:
        raise InvalidGeometry(field, "must be positive", value)


class DefaultJoineryRules:
    """Standard woodworking fit rules.

    Attributes:
        config: Ratios and constants used by every rule.
    """

    def __init__(self, config: JoineryConfig | None = None) -> None:
        self.config = config or JoineryConfig()

    # -------------------------------------------------------------------------
    # Channel joints
    # -------------------------------------------------------------------------

    def rabbet(
        self,
        host_thickness: float,
        insert_thickness: float,
        width_override: float | None = None,
        depth_override: float | None = None,
    ) -> RabbetParams:
        """Derive a rabbet along a host edge.

        Width defaults to the insert thickness; depth defaults to
        ``min(0.6 x host, insert)``.

        Raises:
            InvalidGeometry: A thickness or resulting dimension is not
                positive, or the depth reaches the host depth ceiling.
        """
        _require_positive("host_thickness", host_thickness)
        _require_positive("insert_thickness", insert_thickness)

        width = insert_thickness if width_override is None else width_override
        if depth_override is None:
            depth = min(self.config.rabbet_depth_ratio * host_thickness, insert_thickness)
        else:
            depth = depth_override

        self._check_channel(host_thickness, width, depth)
        return RabbetParams(width=width, depth=depth)

    def dado(
        self,
        host_thickness: float,
        insert_thickness: float | None = None,
        width_override: float | None = None,
        depth_override: float | None = None,
        offset: float | None = None,
        axis: Axis | None = None,
    ) -> DadoParams:
        """Derive a dado across the host.

        Width defaults to the insert thickness; depth defaults to a third
        of the host thickness.

        Raises:
            MissingRequiredField: Neither an insert nor a width override.
            InvalidGeometry: Non-positive dimensions or a depth at or past
                the host depth ceiling.
        """
        width, depth = self._channel(host_thickness, insert_thickness, width_override, depth_override)
        self._check_offset(offset)
        return DadoParams(width=width, depth=depth, offset=offset, axis=axis or Axis.X)

    def groove(
        self,
        host_thickness: float,
        insert_thickness: float | None = None,
        width_override: float | None = None,
        depth_override: float | None = None,
        offset: float | None = None,
        axis: Axis | None = None,
    ) -> GrooveParams:
        """Derive a groove. Same rules as :meth:`dado`."""
        width, depth = self._channel(host_thickness, insert_thickness, width_override, depth_override)
        self._check_offset(offset)
        return GrooveParams(width=width, depth=depth, offset=offset, axis=axis or Axis.X)

    def _channel(
        self,
        host_thickness: float,
        insert_thickness: float | None,
        width_override: float | None,
        depth_override: float | None,
    ) -> tuple[float, float]:
        _require_positive("host_thickness", host_thickness)
        if insert_thickness is not None:
            _require_positive("insert_thickness", insert_thickness)

        width = width_override if width_override is not None else insert_thickness
        if width is None:
            raise MissingRequiredField("width", "no insert part and no width override")
        if depth_override is None:
            depth = self.config.dado_depth_ratio * host_thickness
        else:
            depth = depth_override

        self._check_channel(host_thickness, width, depth)
        return width, depth

    def _check_channel(self, host_thickness: float, width: float, depth: float) -> None:
        if width <= 0:
            raise InvalidGeometry("width", "must be positive", width)
        if depth <= 0:
            raise InvalidGeometry("depth", "must be positive", depth)
        ceiling = self.config.depth_ceiling_ratio * host_thickness
        if depth >= ceiling:
            raise InvalidGeometry(
                "depth",
                f"{depth:g} reaches the {self.config.depth_ceiling_ratio:g} x host "
                f"thickness ceiling ({ceiling:g})",
                depth,
            )

    @staticmethod
    def _check_offset(offset: float | None) -> None:
        if offset is not None and offset < 0:
            raise InvalidGeometry("offset", "must be non-negative", offset)

    # -------------------------------------------------------------------------
    # Mortise and tenon
    # -------------------------------------------------------------------------

    def mortise_tenon(
        self,
        leg_thickness: float,
        apron_thickness: float,
        apron_height_class: ApronHeightClass | None = None,
        units: Units | None = None,
        *,
        tenon_thickness: float | None = None,
        tenon_length: float | None = None,
        shoulder: float | None = None,
        haunch: float | None = None,
    ) -> MortiseTenonParams:
        """Derive a matched mortise (in the leg) and tenon (on the apron).

        Inputs and outputs are in ``units``; the rules run in inches.
        The nominal tenon is a third of the apron clamped to
        [1/4in, 3/8in]. The mortise takes the nominal width, the tenon is
        that minus the press-fit undersize, clamped back into range.
        Declared overrides replace the derived values; a declared tenon
        thickness must not exceed a third of the apron, and the mortise
        gets the declared thickness plus the undersize.

        Raises:
            InvalidGeometry: Non-positive thickness, or a declared value
                that breaks a fit ceiling.
        """
        units = units or Units.MM
        height_class = apron_height_class or ApronHeightClass.MEDIUM
        cfg = self.config

        _require_positive("leg_thickness", leg_thickness)
        _require_positive("apron_thickness", apron_thickness)
        leg = to_inches(leg_thickness, units)
        apron = to_inches(apron_thickness, units)

        if tenon_thickness is None:
            mortise_width = _clamp(apron / 3, cfg.tenon_min, cfg.tenon_max)
            tenon = _clamp(mortise_width - cfg.undersize, cfg.tenon_min, cfg.tenon_max)
        else:
            _require_positive("tenon_thickness", tenon_thickness)
            tenon = to_inches(tenon_thickness, units)
            if tenon > apron / 3 + _EPSILON:
                raise InvalidGeometry(
                    "tenon_thickness",
                    f"{tenon_thickness:g} exceeds a third of the apron thickness",
                    tenon_thickness,
                )
            mortise_width = tenon + cfg.undersize

        if tenon_length is None:
            length = min(cfg.tenon_length_max, cfg.tenon_length_ratio * leg)
        else:
            _require_positive("tenon_length", tenon_length)
            length = to_inches(tenon_length, units)
            if length >= cfg.depth_ceiling_ratio * leg:
                raise InvalidGeometry(
                    "tenon_length",
                    f"{tenon_length:g} reaches the {cfg.depth_ceiling_ratio:g} x leg "
                    "thickness ceiling",
                    tenon_length,
                )

        shoulder_in = cfg.shoulder if shoulder is None else to_inches(shoulder, units)
        if shoulder_in < 0:
            raise InvalidGeometry("shoulder", "must be non-negative", shoulder)

        apron_height = cfg.apron_heights[height_class]
        mortise_height = max(cfg.mortise_height_min, apron_height - 2 * shoulder_in)

        logger.debug(
            "Mortise/tenon %s apron: tenon %.4fin x %.4fin, mortise height %.4fin",
            height_class.value,
            tenon,
            length,
            mortise_height,
        )

        def out(value: float) -> float:
            return round_length(inches_to(value, units), units)

        depth = out(length)
        return MortiseTenonParams(
            mortise=MortiseParams(
                width=out(mortise_width),
                height=out(mortise_height),
                depth=depth,
            ),
            tenon=TenonParams(
                thickness=out(tenon),
                length=depth,
                width=out(mortise_height),
                shoulders=out(shoulder_in),
                haunch=round_length(haunch, units) if haunch is not None else None,
            ),
            units=units,
        )


DEFAULT_RULES = DefaultJoineryRules()


def derive_rabbet(
    host_thickness: float,
    insert_thickness: float,
    width_override: float | None = None,
    depth_override: float | None = None,
) -> RabbetParams:
    """Derive a rabbet with the default rules. See :meth:`DefaultJoineryRules.rabbet`."""
    return DEFAULT_RULES.rabbet(host_thickness, insert_thickness, width_override, depth_override)


def derive_dado(
    host_thickness: float,
    insert_thickness: float | None = None,
    width_override: float | None = None,
    depth_override: float | None = None,
    offset: float | None = None,
    axis: Axis | None = None,
) -> DadoParams:
    """Derive a dado with the default rules."""
    return DEFAULT_RULES.dado(
        host_thickness, insert_thickness, width_override, depth_override, offset, axis
    )


def derive_groove(
    host_thickness: float,
    insert_thickness: float | None = None,
    width_override: float | None = None,
    depth_override: float | None = None,
    offset: float | None = None,
    axis: Axis | None = None,
) -> GrooveParams:
    """Derive a groove with the default rules."""
    return DEFAULT_RULES.groove(
        host_thickness, insert_thickness, width_override, depth_override, offset, axis
    )


def derive_mortise_tenon(
    leg_thickness: float,
    apron_thickness: float,
    apron_height_class: ApronHeightClass | None = None,
    units: Units | None = None,
) -> MortiseTenonParams:
    """Derive a mortise and tenon with the default rules."""
    return DEFAULT_RULES.mortise_tenon(leg_thickness, apron_thickness, apron_height_class, units)
