"""Tests for the exporter framework and format exporters.

Tests cover:
- ExporterRegistry registration and lookup
- ExportManager file naming and validation
- JSON, SVG, DXF, G-code and STL exporters
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import ClassVar

import ezdxf
import pytest

from furnicam import __version__
from furnicam.application import ManufacturingOutput, ServiceFactory
from furnicam.application.config import config_to_spec, load_config
from furnicam.domain import Part, ProductionSpec
from furnicam.infrastructure.exporters import (
    DxfExporter,
    ExporterRegistry,
    ExportManager,
    GcodeExporter,
    JsonExporter,
    StlSolidsExporter,
    SvgExporter,
)
from furnicam.infrastructure.sheet_diagram import SheetDiagramRenderer
from furnicam.infrastructure.sheet_nesting import NestingResult


@pytest.fixture
def factory(recording_backend) -> ServiceFactory:
    """Factory wired to the recording boolean backend."""
    return ServiceFactory(backend=recording_backend)


@pytest.fixture
def bookcase_output(factory: ServiceFactory, bookcase_spec: ProductionSpec) -> ManufacturingOutput:
    """Manufacturing output for the bookcase, with solids."""
    return factory.create_manufacturing_command().execute(bookcase_spec)


@pytest.fixture
def side_table_output(factory: ServiceFactory, fixtures_path: Path) -> ManufacturingOutput:
    """Manufacturing output for the inch side table, without solids."""
    spec = config_to_spec(load_config(fixtures_path / "side_table.json"))
    return factory.create_manufacturing_command().execute(spec, include_solids=False)


@pytest.fixture
def restore_registry():
    """Restore the exporter registry after a test modifies it."""
    saved = dict(ExporterRegistry._exporters)
    yield
    ExporterRegistry._exporters.clear()
    ExporterRegistry._exporters.update(saved)


# =============================================================================
# Registry and manager
# =============================================================================


class TestExporterRegistry:
    """Tests for exporter registration."""

    def test_builtin_formats(self) -> None:
        """Every built-in format is registered."""
        assert ExporterRegistry.available_formats() == ["dxf", "gcode", "json", "stl", "svg"]
        assert ExporterRegistry.get("gcode") is GcodeExporter
        assert ExporterRegistry.is_registered("svg")

    def test_unknown_format(self) -> None:
        """Unknown formats raise KeyError listing the available ones."""
        with pytest.raises(KeyError, match="Available formats"):
            ExporterRegistry.get("step")

    def test_register_custom_exporter(self, restore_registry) -> None:
        """The decorator registers new formats."""

        @ExporterRegistry.register("csv")
        class CsvExporter:
            format_name: ClassVar[str] = "csv"
            file_extension: ClassVar[str] = "csv"

            def export(self, output, path):
                path.write_text("id\n")

        assert ExporterRegistry.get("csv") is CsvExporter
        assert "csv" in ExporterRegistry.available_formats()


class TestExportManager:
    """Tests for multi-format export."""

    def test_export_all(self, tmp_path: Path, bookcase_output: ManufacturingOutput) -> None:
        """Files are named after the project and format."""
        manager = ExportManager(tmp_path / "out")
        results = manager.export_all(["gcode", "json", "svg", "dxf"], bookcase_output)

        assert results["gcode"] == tmp_path / "out" / "small_bookcase_gcode.nc"
        assert results["json"].name == "small_bookcase_json.json"
        assert results["svg"].name == "small_bookcase_svg.svg"
        assert results["dxf"].name == "small_bookcase_dxf.dxf"
        assert all(path.exists() for path in results.values())

    def test_project_name_override(self, tmp_path: Path, bookcase_output: ManufacturingOutput) -> None:
        """An explicit project name replaces the title."""
        path = ExportManager(tmp_path).export_single("gcode", bookcase_output, "shop")
        assert path.name == "shop_gcode.nc"
        assert path.read_text() == bookcase_output.gcode

    def test_unknown_format_writes_nothing(
        self, tmp_path: Path, bookcase_output: ManufacturingOutput
    ) -> None:
        """Formats are checked before any file is written."""
        out = tmp_path / "out"
        with pytest.raises(KeyError):
            ExportManager(out).export_all(["gcode", "step"], bookcase_output)
        assert not out.exists()

    def test_missing_solids_writes_nothing(
        self, tmp_path: Path, side_table_output: ManufacturingOutput
    ) -> None:
        """Formats needing cut solids are checked before any file is written."""
        out = tmp_path / "out"
        with pytest.raises(ValueError, match="stl require cut solids"):
            ExportManager(out).export_all(["gcode", "stl"], side_table_output)
        assert not out.exists()

    def test_solid_free_formats_need_no_solids(
        self, tmp_path: Path, side_table_output: ManufacturingOutput
    ) -> None:
        """Outputs built without solids still export every other format."""
        results = ExportManager(tmp_path).export_all(["gcode", "json"], side_table_output)
        assert sorted(results) == ["gcode", "json"]
        assert StlSolidsExporter.requires_solids

    def test_project_name_default(self, bookcase_output: ManufacturingOutput) -> None:
        """Untitled specs fall back to a generic name."""
        assert bookcase_output.project_name == "small_bookcase"
        untitled = ProductionSpec(
            parts=(Part(id="a", name="A", thickness=18, length=500, width=300),)
        )
        output = ServiceFactory().create_manufacturing_command().execute(
            untitled, include_solids=False
        )
        assert output.project_name == "furniture"


# =============================================================================
# Format exporters
# =============================================================================


class TestJsonExporter:
    """Tests for JSON export."""

    def test_bookcase(self, bookcase_output: ManufacturingOutput) -> None:
        """Parts, joints, jobs and nesting are reported in mm."""
        data = json.loads(JsonExporter().export_string(bookcase_output))

        assert data["version"] == __version__
        assert data["title"] == "Small Bookcase"
        assert data["units"] == "mm"
        assert [p["id"] for p in data["parts"]] == ["side", "shelf", "back"]
        assert data["joints"][0]["params"] == {"width": 6.0, "depth": 6.0}
        assert data["joints"][1]["params"]["offset"] == 450.0
        assert data["joints"][1]["params"]["axis"] == "X"
        assert [job["type"] for job in data["cam_jobs"]] == ["RABBET", "DADO"]
        assert data["nesting"]["total_sheets"] == 2
        assert data["nesting"]["sheet"] == {
            "width": 1220.0, "height": 2440.0, "gap": 5.0, "kerf": 0.0
        }
        assert data["parts"][0]["banded_edges"] == []
        assert data["nesting"]["sheets"][0]["placements"][0]["label"] == "Side #1"

    def test_inch_lengths(self, side_table_output: ManufacturingOutput) -> None:
        """Inch specs are reported back in inches."""
        data = JsonExporter().build(side_table_output)

        assert data["units"] == "in"
        leg = data["parts"][0]
        assert (leg["thickness"], leg["length"], leg["width"]) == (1.75, 28.0, 1.75)

        mortise = data["joints"][0]["params"]["mortise"]
        tenon = data["joints"][0]["params"]["tenon"]
        assert mortise == {"width": 0.25, "height": 3.25, "depth": 0.5}
        assert tenon["thickness"] == 0.25
        assert tenon["haunch"] is None

        groove = data["joints"][1]["params"]
        assert groove["width"] == 0.25
        assert groove["offset"] == 3.0
        assert data["cam_jobs"][0]["axis"] == "Y"

    def test_export_file(self, tmp_path: Path, bookcase_output: ManufacturingOutput) -> None:
        """export writes the same JSON as export_string."""
        path = tmp_path / "out.json"
        exporter = JsonExporter(indent=4)
        exporter.export(bookcase_output, path)
        assert path.read_text() == exporter.export_string(bookcase_output)


class TestSvgExporter:
    """Tests for SVG sheet diagrams."""

    def test_bookcase_sheets(self, bookcase_output: ManufacturingOutput) -> None:
        """Every sheet and piece is drawn."""
        svg = SvgExporter().export_string(bookcase_output)

        assert svg.startswith("<svg")
        assert svg.rstrip().endswith("</svg>")
        assert "Sheet 1 - Plywood 18mm - 3 pieces" in svg
        assert "Plywood 6mm - 1 pieces" in svg
        assert "Side #2" in svg
        assert "300 x 900" in svg

    def test_inch_dimensions(self, side_table_output: ManufacturingOutput) -> None:
        """Dimensions are written in the spec's unit."""
        svg = SvgExporter().export_string(side_table_output)
        assert "Maple 1.75in" in svg
        assert "20 x 20" in svg

    def test_hide_dimensions(self, bookcase_output: ManufacturingOutput) -> None:
        """Dimension text can be turned off."""
        svg = SvgExporter(show_dimensions=False).export_string(bookcase_output)
        assert "300 x 900" not in svg
        assert "Side #1" in svg

    def test_labels_escaped(self) -> None:
        """Labels are XML-escaped."""
        spec = ProductionSpec(
            parts=(Part(id="d", name="Drawer & Door", thickness=18, length=500, width=400),)
        )
        output = ServiceFactory().create_manufacturing_command().execute(spec, include_solids=False)
        svg = SvgExporter().export_string(output)
        assert "Drawer &amp; Door" in svg
        assert "Drawer & Door" not in svg

    def test_empty_result(self) -> None:
        """An empty nesting result renders a placeholder."""
        assert "No sheets to display" in SheetDiagramRenderer().render(NestingResult())


class TestDxfExporter:
    """Tests for DXF export."""

    def test_layers_and_entities(self, bookcase_output: ManufacturingOutput) -> None:
        """Sheets, outlines, joinery and labels land on their layers."""
        doc = DxfExporter().build_document(bookcase_output)
        msp = doc.modelspace()

        for layer in ("SHEET", "OUTLINE", "JOINERY", "LABELS"):
            assert doc.layers.has_entry(layer)
        assert len(msp.query('LWPOLYLINE[layer=="SHEET"]')) == 2
        assert len(msp.query('LWPOLYLINE[layer=="OUTLINE"]')) == 4
        # rabbet and dado on each of the two sides
        assert len(msp.query('LWPOLYLINE[layer=="JOINERY"]')) == 4
        assert len(msp.query("MTEXT")) == 4

    def test_sheets_laid_out_along_x(self, bookcase_output: ManufacturingOutput) -> None:
        """The second sheet starts after the first plus the spacing."""
        doc = DxfExporter(sheet_spacing=100).build_document(bookcase_output)
        sheets = doc.modelspace().query('LWPOLYLINE[layer=="SHEET"]')
        starts = sorted(min(x for x, *_ in sheet.get_points()) for sheet in sheets)
        assert starts == [0.0, 1320.0]

    def test_export_reads_back(self, tmp_path: Path, bookcase_output: ManufacturingOutput) -> None:
        """The saved file is a readable DXF."""
        path = tmp_path / "sheets.dxf"
        DxfExporter().export(bookcase_output, path)
        doc = ezdxf.readfile(path)
        assert len(doc.modelspace().query("LWPOLYLINE")) == 10

    def test_export_string(self, bookcase_output: ManufacturingOutput) -> None:
        """String export contains the layer table."""
        text = DxfExporter().export_string(bookcase_output)
        assert "JOINERY" in text


class TestGcodeAndStlExporters:
    """Tests for the G-code and STL exporters."""

    def test_gcode_export(self, tmp_path: Path, bookcase_output: ManufacturingOutput) -> None:
        """The G-code exporter writes the output's program."""
        path = tmp_path / "joinery.nc"
        GcodeExporter().export(bookcase_output, path)
        assert path.read_text() == bookcase_output.gcode

    def test_stl_export(self, tmp_path: Path, bookcase_output: ManufacturingOutput) -> None:
        """Solids are written to STL."""
        path = tmp_path / "solids.stl"
        StlSolidsExporter().export(bookcase_output, path)
        assert path.stat().st_size > 0

    def test_stl_requires_solids(self, tmp_path: Path, side_table_output: ManufacturingOutput) -> None:
        """Outputs built without solids cannot be written as STL."""
        with pytest.raises(ValueError, match="requires cut solids"):
            StlSolidsExporter().export(side_table_output, tmp_path / "x.stl")

    def test_stl_has_no_string_form(self, bookcase_output: ManufacturingOutput) -> None:
        """STL is binary only."""
        with pytest.raises(NotImplementedError):
            StlSolidsExporter().export_string(bookcase_output)
