"""Project file loading and load-error reporting.

A project file can fail at four stages: it may be unreadable, not JSON,
not a valid project schema, or valid but naming part ids that are not in
its cut list. Each stage raises ConfigError with its own ConfigErrorKind,
and every detail points at a JSON path in the file so the user can find
the offending value.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from furnicam.application.config.adapter import config_to_spec
from furnicam.application.config.schema import ProjectConfiguration
from furnicam.domain import DanglingReference, ProductionSpec

# Domain field name -> file key, for reference errors on joins
_JOIN_REFERENCE_KEYS = {
    "host_part_id": "hostPartId",
    "insert_part_id": "insertPartId",
}


class ConfigErrorKind(str, Enum):
    """Stage at which a project file failed to load."""

    FILE_NOT_FOUND = "file_not_found"
    PERMISSION_DENIED = "permission_denied"
    FILE_READ_ERROR = "file_read_error"
    JSON_PARSE = "json_parse"
    VALIDATION = "validation"
    REFERENCE = "reference"


class ConfigError(Exception):
    """A project file could not be loaded.

    Attributes:
        message: Human readable summary, one line per detail.
        error_type: The ConfigErrorKind of the failure.
        path: The project file, or None when loading from a dict.
        details: One dict per problem. JSON errors carry line/column;
            schema and reference errors carry a JSON path, a message and,
            where known, the part or join the problem belongs to.
    """

    def __init__(
        self,
        message: str,
        error_type: ConfigErrorKind,
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("spec", "joins", 0, "depth"))
        'spec.joins[0].depth'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _subject(loc: tuple[str | int, ...], data: Any) -> str | None:
    """Name the part or join an error location falls inside, if any.

    Parts are named by their id; joins by their 1-based position and
    host part, matching how the resolver reports them.
    """
    if len(loc) < 3 or loc[0] != "spec" or not isinstance(loc[2], int):
        return None
    try:
        entry = data["spec"][loc[1]][loc[2]]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(entry, dict):
        return None
    if loc[1] == "cutlist" and isinstance(entry.get("id"), str):
        return f"part '{entry['id']}'"
    if loc[1] == "joins":
        host = entry.get("hostPartId", entry.get("host_part_id"))
        if isinstance(host, str):
            return f"join {loc[2] + 1} on '{host}'"
        return f"join {loc[2] + 1}"
    return None


def _extract_validation_errors(
    error: PydanticValidationError, data: Any = None
) -> list[dict[str, Any]]:
    """List of error dicts with path, message, value, error_type and subject."""
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
                "subject": _subject(err["loc"], data),
            }
        )
    return details


def _format_details(heading: str, details: list[dict[str, Any]]) -> str:
    lines = [heading]
    for detail in details:
        line = f"  - {detail['path']}: {detail['message']}"
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            line += f" (got: {value!r})"
        if detail.get("subject"):
            line += f" [{detail['subject']}]"
        lines.append(line)
    return "\n".join(lines)


def _validate(data: Any, path: Path | None) -> ProjectConfiguration:
    try:
        return ProjectConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e, data)
        raise ConfigError(
            message=_format_details("Configuration validation failed:", details),
            error_type=ConfigErrorKind.VALIDATION,
            path=path,
            details=details,
        )


def _reference_error(
    error: DanglingReference, config: ProjectConfiguration, path: Path | None
) -> ConfigError:
    """Locate an unknown part id in the file's joins."""
    key = _JOIN_REFERENCE_KEYS.get(error.field, error.field)
    json_path = f"spec.{key}"
    subject = None
    for index, join in enumerate(config.spec.joins):
        if getattr(join, error.field, None) == error.reference:
            json_path = f"spec.joins[{index}].{key}"
            subject = f"join {index + 1} on '{join.host_part_id}'"
            break

    details = [
        {
            "path": json_path,
            "message": f"unknown part id '{error.reference}'",
            "value": error.reference,
            "error_type": type(error).__name__,
            "subject": subject,
        }
    ]
    # The reference is already quoted in the message
    details_for_message = [dict(details[0], value=None)]
    return ConfigError(
        message=_format_details(
            "Project references parts missing from its cut list:", details_for_message
        ),
        error_type=ConfigErrorKind.REFERENCE,
        path=path,
        details=details,
    )


def load_config(path: Path) -> ProjectConfiguration:
    """Load and validate a project configuration from a JSON file.

    Args:
        path: Path to the JSON project file

    Returns:
        A validated ProjectConfiguration instance

    Raises:
        ConfigError: If the file cannot be read, parsed or validated. The
            error_type attribute says which.

    Example:
        >>> try:
        ...     config = load_config(Path("side-table.json"))
        ... except ConfigError as e:
        ...     print(f"Error: {e}")
    """
    if not path.exists():
        raise ConfigError(
            message=f"Project file not found: {path}",
            error_type=ConfigErrorKind.FILE_NOT_FOUND,
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading project file: {path}",
            error_type=ConfigErrorKind.PERMISSION_DENIED,
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading project file: {path}: {e}",
            error_type=ConfigErrorKind.FILE_READ_ERROR,
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in project file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type=ConfigErrorKind.JSON_PARSE,
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any]) -> ProjectConfiguration:
    """Load and validate a project configuration from a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(data, None)


def load_spec(path: Path) -> tuple[ProjectConfiguration, ProductionSpec]:
    """Load a project file and convert it to a millimeter ProductionSpec.

    A join naming a part id that is not in the cut list is reported as a
    REFERENCE ConfigError pointing at the join's field in the file.
    Other domain errors raised by the conversion propagate unchanged.

    Raises:
        ConfigError: If the file fails to load or references unknown parts.
        FurnicamError: If a converted part or join is otherwise invalid.
    """
    config = load_config(path)
    try:
        return config, config_to_spec(config)
    except DanglingReference as e:
        raise _reference_error(e, config, path) from e
