"""Domain errors raised by the joinery, nesting, toolpath and solid builders.

Every error carries the offending field or identifier so callers can
report exactly what was rejected. Errors are deterministic functions of
the input and are never retried.
"""

from __future__ import annotations


class FurnicamError(Exception):
    """Base class for all domain errors."""


class InvalidGeometry(FurnicamError, ValueError):
    """A dimension is non-positive or violates a fit ceiling.

    Attributes:
        field: Name of the offending dimension (e.g. "depth").
        value: The rejected value, if known.
    """

    def __init__(self, field: str, message: str, value: float | None = None) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field}: {message}")


class PartTooLarge(FurnicamError):
    """A part cannot fit on an empty stock sheet.

    Attributes:
        part: Label of the part that does not fit.
        width: Part width in millimeters.
        height: Part height in millimeters.
    """

    def __init__(self, part: str, width: float, height: float, message: str) -> None:
        self.part = part
        self.width = width
        self.height = height
        super().__init__(message)


class DanglingReference(FurnicamError):
    """A join names a part id that is not in the cut list.

    Attributes:
        reference: The unknown part id.
        field: The join field holding the reference.
    """

    def __init__(self, reference: str, field: str = "part_id") -> None:
        self.reference = reference
        self.field = field
        super().__init__(f"{field}: unknown part id '{reference}'")


class MissingRequiredField(FurnicamError):
    """A join kind's required geometry could not be resolved.

    Attributes:
        field: Name of the missing field.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(f"{field}: {message or 'required value is missing'}")


__all__ = [
    "DanglingReference",
    "FurnicamError",
    "InvalidGeometry",
    "MissingRequiredField",
    "PartTooLarge",
]
