"""Configuration schema and loading for project files.

Public API:
    - ProjectConfiguration: Root configuration model
    - ProductionSpecSchema, PartSchema, JoinSchema: Production spec models
    - ToolingSchema, SheetSchema: Machine and stock settings
    - load_config / load_config_from_dict: Load and validate a configuration
    - load_spec: Load a project file straight to a ProductionSpec
    - ConfigError, ConfigErrorKind: Load failures and the stage they hit
    - config_to_spec / config_to_tooling / config_to_sheet: Domain adapters

Example:
    >>> from pathlib import Path
    >>> from furnicam.application.config import load_config, config_to_spec
    >>>
    >>> config = load_config(Path("side-table.json"))
    >>> spec = config_to_spec(config)
"""

from furnicam.application.config.adapter import (
    config_to_sheet,
    config_to_spec,
    config_to_tooling,
    config_units,
)
from furnicam.application.config.loader import (
    ConfigError,
    ConfigErrorKind,
    load_config,
    load_config_from_dict,
    load_spec,
)
from furnicam.application.config.schema import (
    SUPPORTED_VERSIONS,
    JoinSchema,
    MaterialSchema,
    MortiseTenonSchema,
    OverallSchema,
    PartSchema,
    ProductionSpecSchema,
    ProjectConfiguration,
    SheetSchema,
    ToleranceSchema,
    ToolingSchema,
)

__all__ = [
    "ConfigError",
    "ConfigErrorKind",
    "JoinSchema",
    "MaterialSchema",
    "MortiseTenonSchema",
    "OverallSchema",
    "PartSchema",
    "ProductionSpecSchema",
    "ProjectConfiguration",
    "SUPPORTED_VERSIONS",
    "SheetSchema",
    "ToleranceSchema",
    "ToolingSchema",
    "config_to_sheet",
    "config_to_spec",
    "config_to_tooling",
    "config_units",
    "load_config",
    "load_config_from_dict",
    "load_spec",
]
