"""Fixtures for E2E pipeline tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest


def create_synthetic_terrain(
    output_path: Path,
    grid: int = 40,
    spacing: float = 0.5,
    seed: int = 0,
) -> Path:
    """
    Create a synthetic colored terrain scan as an XYZ file.

    A gently sloping grid with a ridge down the middle and small noise, plus
    a comment header and one malformed line the loader must skip.

    Args:
        output_path: File to write
        grid: Number of samples per side
        spacing: Grid spacing in x and y
        seed: Noise seed

    Returns:
        Path to the created file
    """
    rng = np.random.default_rng(seed)
    xs, ys = np.meshgrid(np.arange(grid) * spacing, np.arange(grid) * spacing)
    x, y = xs.ravel(), ys.ravel()
    ridge = 3.0 * np.exp(-((x - x.mean()) ** 2) / 4.0)
    z = 0.05 * y + ridge + rng.normal(0, 0.01, size=x.shape)
    rgb = np.clip(np.column_stack([z * 40, 128 + 0 * z, 255 - z * 40]), 0, 255).astype(int)

    lines = ["# synthetic terrain", "1.0 2.0"]
    for (px, py, pz), (r, g, b) in zip(np.column_stack([x, y, z]), rgb):
        lines.append(f"{px:.4f} {py:.4f} {pz:.4f} {r} {g} {b}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines) + "\n")
    return output_path


@pytest.fixture
def synthetic_terrain(tmp_path: Path) -> Path:
    """1600-point terrain scan in a temp directory."""
    return create_synthetic_terrain(tmp_path / "raw" / "terrain.xyz")
