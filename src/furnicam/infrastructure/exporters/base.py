"""Exporter protocol, format registry and the multi-format export manager.

Every output file furnicam writes comes from a ManufacturingOutput that
has already been built, so exporters never fail on joinery. What can
still go wrong is the output lacking something a format needs (STL needs
cut solids) or the requested format not existing; ExportManager checks
both for every requested format before it creates the output directory,
so a failed export leaves no partial set of files behind.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from furnicam.application.dtos import ManufacturingOutput


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """A file format for manufacturing output.

    Attributes:
        format_name: Registered name of the format (e.g., "gcode", "json").
        file_extension: File extension without leading dot (e.g., "nc").
        requires_solids: Whether the output must have been built with
            cut solids.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]
    requires_solids: ClassVar[bool] = False

    @abstractmethod
    def export(self, output: ManufacturingOutput, path: Path) -> None:
        """Write the output to ``path``."""
        ...

    def export_string(self, output: ManufacturingOutput) -> str:
        """Render the output as text.

        Raises:
            NotImplementedError: If the format is binary.
        """
        raise NotImplementedError(
            f"Format '{self.format_name}' does not support string export"
        )


class ExporterRegistry:
    """Format name to exporter class lookup.

    Exporter modules register on import:

        @ExporterRegistry.register("svg")
        class SvgExporter:
            format_name = "svg"
            file_extension = "svg"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> type:
        """Decorator registering an exporter class under ``format_name``."""

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning("Replacing exporter for format %r", format_name)
            cls._exporters[format_name] = exporter_class
            logger.debug("Registered %s for format %r", exporter_class.__name__, format_name)
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Exporter class for ``format_name``.

        Raises:
            KeyError: If no exporter is registered for the format.
        """
        try:
            return cls._exporters[format_name]
        except KeyError:
            available = ", ".join(cls.available_formats()) or "none"
            raise KeyError(
                f"Unknown export format '{format_name}'. Available formats: {available}"
            ) from None

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters)

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters

    @classmethod
    def clear(cls) -> None:
        """Clear all registered exporters. Used by tests."""
        cls._exporters.clear()


class ExportManager:
    """Writes one manufacturing output in several formats.

    Files are named ``{project}_{format}.{extension}`` inside
    ``output_dir``, which is created on the first successful check.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def _exporters_for(
        self, formats: list[str], output: ManufacturingOutput
    ) -> dict[str, type[Exporter]]:
        exporters = {name: ExporterRegistry.get(name) for name in formats}
        if not output.solids:
            needing = [
                name
                for name, exporter_class in exporters.items()
                if getattr(exporter_class, "requires_solids", False)
            ]
            if needing:
                raise ValueError(
                    f"Format(s) {', '.join(needing)} require cut solids; "
                    "build the output with solids enabled"
                )
        return exporters

    def export_all(
        self,
        formats: list[str],
        output: ManufacturingOutput,
        project_name: str | None = None,
    ) -> dict[str, Path]:
        """Write ``output`` in every format in ``formats``.

        Args:
            formats: Format names to export (e.g., ["gcode", "json"]).
            output: The manufacturing output to export.
            project_name: Base name for output files; defaults to the
                output's project name.

        Returns:
            Format name to written file path.

        Raises:
            KeyError: If any format is not registered.
            ValueError: If a format needs cut solids the output lacks.
            OSError: If file operations fail.
        """
        exporters = self._exporters_for(formats, output)
        project_name = project_name or output.project_name

        self.output_dir.mkdir(parents=True, exist_ok=True)

        results: dict[str, Path] = {}
        for format_name, exporter_class in exporters.items():
            exporter = exporter_class()
            filepath = self.output_dir / f"{project_name}_{format_name}.{exporter.file_extension}"
            logger.info("Writing %s output to %s", format_name, filepath)
            exporter.export(output, filepath)
            results[format_name] = filepath

        logger.debug("Exported %d file(s) for %s", len(results), project_name)
        return results

    def export_single(
        self,
        format_name: str,
        output: ManufacturingOutput,
        project_name: str | None = None,
    ) -> Path:
        """Write ``output`` in one format and return the file path."""
        return self.export_all([format_name], output, project_name)[format_name]
