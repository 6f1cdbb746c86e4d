"""Contracts shared between the domain, infrastructure and application layers."""

from furnicam.contracts.protocols import BooleanBackend, JoineryRules

__all__ = ["BooleanBackend", "JoineryRules"]
