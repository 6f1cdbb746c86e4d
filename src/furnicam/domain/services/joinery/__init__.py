"""Joinery rule engine.

This package provides:
- DefaultJoineryRules and the derive_* functions for rabbet, dado,
  groove and mortise-and-tenon dimensions
- JointResolver for applying the rules to every join of a spec
- check_mortise_fit for checking a mortise and tenon against the real parts
- cam_job_for / jobs_from_joints for turning resolved joints into CAM jobs
"""

from __future__ import annotations

from .config import JoineryConfig
from .models import (
    DadoParams,
    GrooveParams,
    JointParams,
    MortiseParams,
    MortiseTenonParams,
    RabbetParams,
    ResolvedJoint,
    TenonParams,
)
from .resolver import JointResolver, cam_job_for, check_mortise_fit, jobs_from_joints
from .rules import (
    DEFAULT_RULES,
    DefaultJoineryRules,
    derive_dado,
    derive_groove,
    derive_mortise_tenon,
    derive_rabbet,
)

__all__ = [
    # Config
    "JoineryConfig",
    # Models
    "DadoParams",
    "GrooveParams",
    "JointParams",
    "MortiseParams",
    "MortiseTenonParams",
    "RabbetParams",
    "ResolvedJoint",
    "TenonParams",
    # Rules
    "DEFAULT_RULES",
    "DefaultJoineryRules",
    "derive_dado",
    "derive_groove",
    "derive_mortise_tenon",
    "derive_rabbet",
    # Resolution
    "JointResolver",
    "cam_job_for",
    "check_mortise_fit",
    "jobs_from_joints",
]
