"""Validate command for checking project files.

Loads a project file, converts it to a production spec and resolves every
join, so schema errors, dangling part references and joinery rule
violations are all reported before anything is cut.
"""

from pathlib import Path
from typing import Annotated

import typer

from furnicam.application.config import (
    ConfigError,
    ConfigErrorKind,
    config_to_tooling,
    load_spec,
)
from furnicam.domain import FurnicamError
from furnicam.domain.services.joinery import JointResolver, jobs_from_joints


def _display_load_error(error: ConfigError) -> None:
    """Display a project loading error."""
    typer.echo("Errors:", err=True)
    if error.error_type == ConfigErrorKind.FILE_NOT_FOUND:
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == ConfigErrorKind.JSON_PARSE:
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type in (ConfigErrorKind.VALIDATION, ConfigErrorKind.REFERENCE):
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            subject = detail.get("subject")
            suffix = f" ({subject})" if subject else ""
            typer.echo(f"  {path}: {message}{suffix}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)


def _display_domain_error(error: FurnicamError) -> None:
    typer.echo("Errors:", err=True)
    typer.echo(f"  {error}", err=True)
    typer.echo()
    typer.echo("Validation failed.", err=True)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON project file to validate"),
    ],
) -> None:
    """Validate a project file.

    Checks the file for:
    - JSON syntax errors
    - Schema errors (missing required fields, invalid types, etc.)
    - Unknown part ids in joins
    - Joinery rule violations (depth ceiling, tenon thickness, cut bounds)

    Exit codes:
        0 - Project is valid
        1 - Project has errors

    Example:
        furnicam validate side-table.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config, spec = load_spec(config_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)
    except FurnicamError as e:
        _display_domain_error(e)
        raise typer.Exit(code=1)

    try:
        config_to_tooling(config)
        joints = JointResolver().resolve(spec)
        for job in jobs_from_joints(joints):
            job.validate()
    except FurnicamError as e:
        _display_domain_error(e)
        raise typer.Exit(code=1)

    typer.echo(
        f"Validation passed: {len(spec.parts)} part(s), "
        f"{spec.total_quantity} piece(s), {len(joints)} join(s)."
    )
