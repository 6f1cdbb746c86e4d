"""Unit model: millimeters are canonical, inches are converted at the edges."""

from __future__ import annotations

from enum import Enum

MM_PER_INCH = 25.4


class Units(str, Enum):
    """Length units accepted in production specs and emitted in outputs."""

    MM = "mm"
    INCH = "in"

    @property
    def precision(self) -> int:
        """Decimal places used when rounding or formatting lengths."""
        return 3 if self is Units.MM else 4

    @property
    def gcode_word(self) -> str:
        """G-code unit selection word (G21 for mm, G20 for inches)."""
        return "G21" if self is Units.MM else "G20"


def to_mm(value: float, units: Units) -> float:
    """Convert a length expressed in ``units`` to millimeters."""
    return value * MM_PER_INCH if units is Units.INCH else value


def from_mm(value: float, units: Units) -> float:
    """Convert a length in millimeters to ``units``."""
    return value / MM_PER_INCH if units is Units.INCH else value


def inches_to(value: float, units: Units) -> float:
    """Convert a length in inches to ``units``."""
    return value * MM_PER_INCH if units is Units.MM else value


def to_inches(value: float, units: Units) -> float:
    """Convert a length expressed in ``units`` to inches."""
    return value / MM_PER_INCH if units is Units.MM else value


def round_length(value: float, units: Units) -> float:
    """Round a length with unit-appropriate precision (3 dp mm, 4 dp in)."""
    return round(value, units.precision)


def format_length(value: float, units: Units) -> str:
    """Render a number with unit precision, stripping trailing zeros.

    Examples:
        >>> format_length(6.0, Units.MM)
        '6'
        >>> format_length(0.25, Units.INCH)
        '0.25'
        >>> format_length(-3.1, Units.MM)
        '-3.1'
    """
    text = f"{value:.{units.precision}f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text
