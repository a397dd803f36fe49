"""Step 02: Density reduction.

Always reduces the original cloud from s00 (never a previous reduction), so
re-running with other parameters does not compound approximation error.
"""

from __future__ import annotations

import json
import logging
from typing import ClassVar

import numpy as np

from xyzview.core.step_base import BaseStep
from xyzview.steps.s01_boundary_detection.step import load_boundary
from xyzview.utils.geometry import identify_boundary_points
from xyzview.utils.io import read_xyz, write_xyz
from xyzview.utils.reduction import reduce_point_cloud
from .config import DensityReductionConfig
from .contracts import DensityReductionInput, DensityReductionOutput

logger = logging.getLogger(__name__)


class DensityReductionStep(
    BaseStep[DensityReductionInput, DensityReductionOutput, DensityReductionConfig]
):
    name: ClassVar[str] = "density_reduction"
    input_type: ClassVar = DensityReductionInput
    output_type: ClassVar = DensityReductionOutput
    config_type: ClassVar = DensityReductionConfig

    def validate_inputs(self, inputs: DensityReductionInput) -> bool:
        if not inputs.points_path.exists():
            logger.error(f"Points file not found: {inputs.points_path}")
            return False
        if inputs.boundary_file is not None and not inputs.boundary_file.exists():
            logger.error(f"Boundary file not found: {inputs.boundary_file}")
            return False
        return True

    def _boundary_for(self, inputs: DensityReductionInput, points: list) -> set[int]:
        if not self.config.preserve_boundary:
            return set()
        if inputs.boundary_file is not None:
            return load_boundary(inputs.boundary_file, num_points=len(points))
        logger.info(f"No boundary file given, detecting ({self.config.boundary_mode})")
        return identify_boundary_points(points, self.config.boundary_mode)

    def run(self, inputs: DensityReductionInput) -> DensityReductionOutput:
        output_dir = self.interim_dir("s02_density_reduction")

        points = read_xyz(inputs.points_path)
        if not points:
            raise RuntimeError(f"No points in {inputs.points_path}")

        boundary = self._boundary_for(inputs, points)
        rng = np.random.default_rng(self.config.seed)
        reduced = reduce_point_cloud(
            points,
            self.config.method,
            self.config.target_percentage,
            boundary,
            rng=rng,
        )

        points_path = write_xyz(output_dir / "reduced.xyz", reduced, self.config.decimal_places)

        stats = {
            "method": self.config.method,
            "target_percentage": self.config.target_percentage,
            "num_input_points": len(points),
            "num_boundary_points": len(boundary),
            "num_points": len(reduced),
            "retained_percentage": round(len(reduced) / len(points) * 100, 3),
        }
        stats_path = output_dir / "reduction.json"
        with open(stats_path, "w", encoding="utf-8") as f:
            json.dump(stats, f, indent=2)

        return DensityReductionOutput(
            points_path=points_path,
            stats_path=stats_path,
            num_input_points=len(points),
            num_points=len(reduced),
        )
