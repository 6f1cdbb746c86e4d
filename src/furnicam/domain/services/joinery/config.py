"""Joinery configuration.

This module provides JoineryConfig for tuning the ratios and constants
used by the default joinery rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from furnicam.domain.value_objects import ApronHeightClass


def _default_apron_heights() -> dict[ApronHeightClass, float]:
    return {
        ApronHeightClass.SHORT: 2.5,
        ApronHeightClass.MEDIUM: 3.5,
        ApronHeightClass.TALL: 4.5,
    }


@dataclass(frozen=True)
class JoineryConfig:
    """Configuration for joint dimension derivation.

    Ratios apply to host thickness. Mortise-and-tenon constants are in
    inches because the rules are computed in inches.

    Attributes:
        depth_ceiling_ratio: Cut depth must stay below this share of the
            host thickness (default 0.8).
        rabbet_depth_ratio: Default rabbet depth as a share of the host
            thickness, capped at the insert thickness (default 0.6).
        dado_depth_ratio: Default dado/groove depth as a share of the host
            thickness (default 1/3).
        tenon_min: Smallest tenon thickness in inches (1/4in).
        tenon_max: Largest tenon thickness in inches (3/8in).
        tenon_length_max: Longest tenon in inches (1/2in).
        tenon_length_ratio: Tenon length cap as a share of leg thickness.
        shoulder: Shoulder per side in inches (1/8in).
        mortise_height_min: Shortest mortise in inches (1.5in).
        undersize: Press-fit allowance removed from the tenon, in inches.
        apron_heights: Nominal apron height per class, in inches.
    """

    depth_ceiling_ratio: float = 0.8
    rabbet_depth_ratio: float = 0.6
    dado_depth_ratio: float = 1 / 3  # Standard: 1/3 of thickness
    tenon_min: float = 0.25
    tenon_max: float = 0.375
    tenon_length_max: float = 0.5
    tenon_length_ratio: float = 0.6
    shoulder: float = 0.125
    mortise_height_min: float = 1.5
    undersize: float = 0.004
    apron_heights: dict[ApronHeightClass, float] = field(
        default_factory=_default_apron_heights, hash=False, compare=False
    )

    def __post_init__(self) -> None:
        if not 0 < self.depth_ceiling_ratio <= 1:
            raise ValueError("depth_ceiling_ratio must be between 0 and 1")
        if not 0 < self.rabbet_depth_ratio < self.depth_ceiling_ratio:
            raise ValueError("rabbet_depth_ratio must be positive and below the depth ceiling")
        if not 0 < self.dado_depth_ratio < self.depth_ceiling_ratio:
            raise ValueError("dado_depth_ratio must be positive and below the depth ceiling")
        if not 0 < self.tenon_min <= self.tenon_max:
            raise ValueError("tenon_min must be positive and no larger than tenon_max")
        if self.undersize < 0:
            raise ValueError("undersize must be non-negative")
        missing = set(ApronHeightClass) - set(self.apron_heights)
        if missing:
            raise ValueError(
                f"apron_heights missing classes: {sorted(c.value for c in missing)}"
            )
