"""Infrastructure layer: nesting, toolpaths, solids and file export."""

from furnicam.infrastructure.gcode import ToolpathEmitter
from furnicam.infrastructure.sheet_diagram import SheetDiagramRenderer
from furnicam.infrastructure.sheet_nesting import (
    NestingResult,
    NestItem,
    Placement,
    SheetConfig,
    SheetLayout,
    SheetNester,
    SheetNestingService,
    expand_parts,
    nest,
)
from furnicam.infrastructure.solid_cuts import (
    CutSolid,
    CutSolidCache,
    SolidCutBuilder,
    TrimeshBooleanBackend,
    box_mesh,
)
from furnicam.infrastructure.stl_exporter import StlExporter, StlMeshBuilder

__all__ = [
    "CutSolid",
    "CutSolidCache",
    "NestItem",
    "NestingResult",
    "Placement",
    "SheetConfig",
    "SheetDiagramRenderer",
    "SheetLayout",
    "SheetNester",
    "SheetNestingService",
    "SolidCutBuilder",
    "StlExporter",
    "StlMeshBuilder",
    "ToolpathEmitter",
    "TrimeshBooleanBackend",
    "box_mesh",
    "expand_parts",
    "nest",
]
