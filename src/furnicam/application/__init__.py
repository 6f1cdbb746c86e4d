"""Application layer: use cases, DTOs, configuration and service wiring."""

from furnicam.application.commands import ManufacturingCommand
from furnicam.application.dtos import ManufacturingOutput
from furnicam.application.factory import ServiceFactory

__all__ = [
    "ManufacturingCommand",
    "ManufacturingOutput",
    "ServiceFactory",
]
