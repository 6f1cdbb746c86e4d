"""Exporter framework for manufacturing outputs.

This package provides a unified exporter framework with:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Coordinates multi-format export operations

Registered exporters:
- dxf: Nested sheets with part outlines and joinery cuts for CNC
- gcode: Joinery toolpath program
- json: Parts, resolved joints, CAM jobs and nesting in the spec's unit
- stl: Cut solids for 3D preview
- svg: Nested sheet diagrams

Usage:
    from furnicam.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()

    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["gcode", "json", "svg"], output, project_name="table")
"""

from furnicam.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
)

# Import exporters to trigger registration
from furnicam.infrastructure.exporters.dxf import DxfExporter
from furnicam.infrastructure.exporters.gcode import GcodeExporter
from furnicam.infrastructure.exporters.json import JsonExporter
from furnicam.infrastructure.exporters.stl import StlSolidsExporter
from furnicam.infrastructure.exporters.svg import SvgExporter

__all__ = [
    "DxfExporter",
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "GcodeExporter",
    "JsonExporter",
    "StlSolidsExporter",
    "SvgExporter",
]
