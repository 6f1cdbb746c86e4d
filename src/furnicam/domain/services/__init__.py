"""Domain services."""

from furnicam.domain.services.joinery import (
    DefaultJoineryRules,
    JoineryConfig,
    JointResolver,
)

__all__ = ["DefaultJoineryRules", "JoineryConfig", "JointResolver"]
