"""Shared pytest fixtures for xyzview tests."""

from pathlib import Path

import numpy as np
import pytest

from xyzview.utils.points import Color, Point

CUBE_CORNERS = [
    (0, 0, 0), (10, 0, 0), (10, 10, 0), (0, 10, 0),
    (0, 0, 10), (10, 0, 10), (10, 10, 10), (0, 10, 10),
]
CUBE_INTERIOR = [
    (5, 5, 5), (2, 3, 4), (7, 6, 3), (4, 8, 6), (3, 3, 3),
    (6, 2, 7), (8, 7, 8), (2, 6, 2), (5, 4, 8), (7, 3, 5),
]


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Create a temporary data root with standard directory structure."""
    for subdir in ["raw", "interim/s00_load_points", "interim/s01_boundary_detection",
                   "interim/s02_density_reduction", "processed"]:
        (tmp_path / subdir).mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def cube_fixture() -> list[Point]:
    """18 points: the 8 corners of a 10-unit cube (indices 0-7) + 10 interior points."""
    return [Point(float(x), float(y), float(z)) for x, y, z in CUBE_CORNERS + CUBE_INTERIOR]


@pytest.fixture
def unit_cube_with_center() -> list[Point]:
    """Unit cube corners (indices 0-7) plus the center point (index 8)."""
    corners = [Point(x / 10, y / 10, z / 10) for x, y, z in CUBE_CORNERS]
    return corners + [Point(0.5, 0.5, 0.5)]


@pytest.fixture
def random_cloud() -> list[Point]:
    """1000 colored points uniform in a 100 x 100 x 10 box."""
    rng = np.random.default_rng(7)
    xyz = rng.uniform([0, 0, 0], [100, 100, 10], size=(1000, 3))
    rgb = rng.integers(0, 256, size=(1000, 3))
    return [
        Point(float(x), float(y), float(z), Color(*map(int, c)))
        for (x, y, z), c in zip(xyz, rgb)
    ]


@pytest.fixture
def sample_xyz_file(data_root: Path, cube_fixture: list[Point]) -> Path:
    """Cube fixture as an .xyz file with a comment line and an invalid line."""
    lines = ["# cube fixture", "not a point"]
    for i, p in enumerate(cube_fixture):
        lines.append(f"{p.x} {p.y} {p.z} {i * 10} {255 - i * 10} 128")
    path = data_root / "raw" / "cube.xyz"
    path.write_text("\n".join(lines) + "\n")
    return path
