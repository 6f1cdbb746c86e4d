"""Pytest configuration and shared fixtures for furnicam tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import trimesh

from furnicam.domain import (
    Axis,
    Edge,
    Join,
    JoinType,
    Part,
    ProductionSpec,
)

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "configs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests that run real boolean geometry or the CLI"
    )


# =============================================================================
# Boolean backend test double
# =============================================================================


class RecordingBackend:
    """Boolean backend that records calls instead of doing geometry.

    ``union`` concatenates both meshes and ``subtract`` returns the first
    operand unchanged, so the builder's wiring can be checked without a
    CSG engine.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, trimesh.Trimesh, trimesh.Trimesh]] = []

    def union(self, a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
        self.calls.append(("union", a, b))
        return trimesh.util.concatenate([a, b])

    def subtract(self, a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
        self.calls.append(("subtract", a, b))
        return a

    @property
    def call_names(self) -> list[str]:
        return [name for name, _, _ in self.calls]


@pytest.fixture
def recording_backend() -> RecordingBackend:
    """A fresh recording boolean backend."""
    return RecordingBackend()


# =============================================================================
# Production spec fixtures
# =============================================================================


@pytest.fixture
def bookcase_parts() -> tuple[Part, ...]:
    """Two 18mm sides, an 18mm shelf and a 6mm back."""
    return (
        Part(id="side", name="Side", thickness=18.0, length=900.0, width=300.0, quantity=2),
        Part(id="shelf", name="Shelf", thickness=18.0, length=764.0, width=280.0),
        Part(id="back", name="Back", thickness=6.0, length=900.0, width=800.0),
    )


@pytest.fixture
def bookcase_spec(bookcase_parts: tuple[Part, ...]) -> ProductionSpec:
    """Bookcase with a back rabbet and a shelf dado on the side."""
    return ProductionSpec(
        parts=bookcase_parts,
        joins=(
            Join(
                join_type=JoinType.RABBET,
                host_part_id="side",
                insert_part_id="back",
                host_edge=Edge.E,
            ),
            Join(
                join_type=JoinType.DADO,
                host_part_id="side",
                insert_part_id="shelf",
                axis=Axis.X,
                offset=450.0,
            ),
        ),
        title="Small Bookcase",
        furniture_type="bookcase",
    )


@pytest.fixture
def table_spec() -> ProductionSpec:
    """Leg and apron joined by a derived mortise and tenon (mm)."""
    return ProductionSpec(
        parts=(
            Part(id="leg", name="Leg", thickness=45.0, length=700.0, width=45.0, quantity=4),
            Part(id="apron", name="Apron", thickness=20.0, length=600.0, width=90.0, quantity=4),
        ),
        joins=(
            Join(
                join_type=JoinType.MORTISE_TENON,
                host_part_id="leg",
                insert_part_id="apron",
            ),
        ),
        title="Table",
        furniture_type="table",
    )


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding JSON project fixtures."""
    return FIXTURES_PATH
