"""Step 01: Boundary detection.

Computes the convex-hull boundary index set of the loaded cloud and stores
it as boundary.json so the reduction step can keep those points.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import ClassVar

from xyzview.core.step_base import BaseStep
from xyzview.utils.geometry import identify_boundary_points
from xyzview.utils.io import marked_boundary_points, read_xyz, write_xyz
from .config import BoundaryDetectionConfig
from .contracts import BoundaryDetectionInput, BoundaryDetectionOutput

logger = logging.getLogger(__name__)


def save_boundary(path: Path, indices: set[int], mode: str, num_points: int) -> Path:
    """Write a boundary index set to JSON (indices sorted)."""
    data = {"mode": mode, "num_points": num_points, "indices": sorted(indices)}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


def load_boundary(path: Path, num_points: int | None = None) -> set[int]:
    """Read a boundary index set written by save_boundary.

    Raises:
        ValueError: if the file was computed for a cloud of another size or
            holds an out-of-range index.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    indices = {int(i) for i in data["indices"]}
    if num_points is not None:
        if data.get("num_points", num_points) != num_points:
            raise ValueError(
                f"{path.name} was computed for {data['num_points']} points, cloud has {num_points}"
            )
        bad = [i for i in indices if not 0 <= i < num_points]
        if bad:
            raise ValueError(f"{path.name} holds out-of-range indices, e.g. {bad[0]}")
    return indices


class BoundaryDetectionStep(
    BaseStep[BoundaryDetectionInput, BoundaryDetectionOutput, BoundaryDetectionConfig]
):
    name: ClassVar[str] = "boundary_detection"
    input_type: ClassVar = BoundaryDetectionInput
    output_type: ClassVar = BoundaryDetectionOutput
    config_type: ClassVar = BoundaryDetectionConfig

    def validate_inputs(self, inputs: BoundaryDetectionInput) -> bool:
        if not inputs.points_path.exists():
            logger.error(f"Points file not found: {inputs.points_path}")
            return False
        return True

    def run(self, inputs: BoundaryDetectionInput) -> BoundaryDetectionOutput:
        output_dir = self.interim_dir("s01_boundary_detection")

        points = read_xyz(inputs.points_path)
        if not points:
            raise RuntimeError(f"No points in {inputs.points_path}")

        boundary = identify_boundary_points(
            points, self.config.mode, include_stacked=self.config.include_stacked
        )
        pct = len(boundary) / len(points) * 100
        logger.info(
            f"Boundary ({self.config.mode}): {len(boundary)} of {len(points)} points ({pct:.1f}%)"
        )

        boundary_file = save_boundary(
            output_dir / "boundary.json", boundary, self.config.mode, len(points)
        )

        marked_path = None
        if self.config.export_marked:
            marked_path = write_xyz(
                output_dir / "boundary_marked.xyz",
                marked_boundary_points(points, boundary),
                self.config.decimal_places,
                header="Boundary points marked in RED, interior points in WHITE",
            )

        return BoundaryDetectionOutput(
            boundary_file=boundary_file,
            marked_points_path=marked_path,
            num_boundary_points=len(boundary),
        )
