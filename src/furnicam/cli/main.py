"""Typer CLI for furniture joinery, nesting and toolpaths."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from furnicam.application import ManufacturingOutput, ServiceFactory
from furnicam.application.config import (
    ConfigError,
    ProjectConfiguration,
    config_to_sheet,
    config_to_tooling,
    load_spec,
)
from furnicam.cli.commands import validate_command
from furnicam.domain import FurnicamError, ProductionSpec, Units
from furnicam.domain.value_objects import format_length, from_mm
from furnicam.infrastructure.exporters import ExporterRegistry, ExportManager

app = typer.Typer(
    name="furnicam",
    help="Derive joinery, nest cut lists and emit G-code for rectangular furniture parts.",
)

# Register validate command
app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr"),
    ] = False,
) -> None:
    """Derive joinery, nest cut lists and emit G-code for furniture parts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def _load(config_file: Path) -> tuple[ProjectConfiguration, ProductionSpec]:
    try:
        return load_spec(config_file)
    except (ConfigError, FurnicamError) as e:
        raise _fail(str(e))


def _factory(config: ProjectConfiguration, include_comments: bool = True) -> ServiceFactory:
    return ServiceFactory(sheet=config_to_sheet(config), include_comments=include_comments)


def _build(
    config: ProjectConfiguration,
    spec: ProductionSpec,
    include_solids: bool = False,
    include_comments: bool = True,
) -> ManufacturingOutput:
    command = _factory(config, include_comments).create_manufacturing_command()
    try:
        return command.execute(
            spec, config_to_tooling(config), include_solids=include_solids
        )
    except FurnicamError as e:
        raise _fail(str(e))


def _length(value_mm: float, units: Units) -> str:
    return format_length(from_mm(value_mm, units), units)


@app.command()
def joints(
    config_file: Annotated[Path, typer.Argument(help="Path to the JSON project file")],
) -> None:
    """Show derived dimensions for every join."""
    config, spec = _load(config_file)
    try:
        resolved = _factory(config).resolver.resolve(spec)
    except FurnicamError as e:
        raise _fail(str(e))
    units = spec.units

    if not resolved:
        typer.echo("No joins declared.")
        return

    for joint in resolved:
        insert = f" <- {joint.insert.name}" if joint.insert else ""
        typer.echo(f"{joint.join_type.value}: {joint.host.name}{insert}")
        params = joint.params.to_dict()
        for key in ("mortise", "tenon"):
            if key in params:
                values = ", ".join(
                    f"{name} {_length(value, units)}"
                    for name, value in params[key].items()
                    if value is not None
                )
                typer.echo(f"  {key}: {values} {units.value}")
        if "width" in params:
            typer.echo(
                f"  width {_length(params['width'], units)} x "
                f"depth {_length(params['depth'], units)} {units.value}"
            )


@app.command()
def nest(
    config_file: Annotated[Path, typer.Argument(help="Path to the JSON project file")],
) -> None:
    """Nest the cut list onto stock sheets, one sheet series per material."""
    config, spec = _load(config_file)
    service = _factory(config).nesting_service
    try:
        result = service.nest_spec(spec)
    except FurnicamError as e:
        raise _fail(str(e))

    units = spec.units
    for layout in result.layouts:
        typer.echo(
            f"{layout.material} {_length(layout.thickness, units)}{units.value} "
            f"sheet {layout.sheet_index}: {layout.piece_count} piece(s), "
            f"{layout.waste_percentage:.1f}% waste"
        )
        for p in layout.placements:
            typer.echo(
                f"  {p.label} @ ({_length(p.x, units)}, {_length(p.y, units)}) "
                f"{_length(p.width, units)} x {_length(p.height, units)}"
            )
    typer.echo(f"Total sheets: {result.total_sheets}")


@app.command()
def gcode(
    config_file: Annotated[Path, typer.Argument(help="Path to the JSON project file")],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write G-code to this file instead of stdout"),
    ] = None,
    outlines: Annotated[
        bool,
        typer.Option("--outlines", help="Trace nested cut-list outlines instead of joinery"),
    ] = False,
    no_comments: Annotated[
        bool,
        typer.Option("--no-comments", help="Omit comments from the program"),
    ] = False,
) -> None:
    """Emit G-code for the declared joinery or the nested cut list."""
    config, spec = _load(config_file)
    if outlines:
        command = _factory(config, not no_comments).create_manufacturing_command()
        try:
            program = command.cutlist_outlines(spec, config_to_tooling(config))
        except FurnicamError as e:
            raise _fail(str(e))
    else:
        program = _build(config, spec, include_comments=not no_comments).gcode

    if output_file is None:
        typer.echo(program, nl=False)
        return
    output_file.write_text(program)
    typer.echo(f"G-code written to {output_file}")


@app.command()
def export(
    config_file: Annotated[Path, typer.Argument(help="Path to the JSON project file")],
    formats: Annotated[
        str,
        typer.Option(
            "--formats",
            "-f",
            help="Comma-separated export formats: dxf,gcode,json,stl,svg (or 'all')",
        ),
    ] = "all",
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-d", help="Output directory for exported files"),
    ] = Path("output"),
    project_name: Annotated[
        str | None,
        typer.Option("--project-name", help="Project name for output file naming"),
    ] = None,
) -> None:
    """Export manufacturing files in one or more formats."""
    if formats.lower() == "all":
        selected = ExporterRegistry.available_formats()
    else:
        selected = [f.strip().lower() for f in formats.split(",") if f.strip()]

    available = ExporterRegistry.available_formats()
    invalid = [f for f in selected if f not in available]
    if invalid or not selected:
        typer.echo(f"Unknown formats: {', '.join(invalid) or formats}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)

    config, spec = _load(config_file)
    output = _build(config, spec, include_solids="stl" in selected)

    manager = ExportManager(output_dir)
    try:
        results = manager.export_all(selected, output, project_name)
    except OSError as e:
        raise _fail(f"Could not write exports: {e}")

    for format_name, path in results.items():
        typer.echo(f"{format_name}: {path}")


if __name__ == "__main__":
    app()
