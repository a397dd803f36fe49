"""Step 00: Load an XYZ point file into the pipeline workspace."""

from __future__ import annotations

import json
import logging
from typing import ClassVar

from xyzview.core.step_base import BaseStep
from xyzview.utils.geometry import invert_elevation
from xyzview.utils.io import read_xyz, write_xyz
from xyzview.utils.points import bounding_box, count_colored
from .config import LoadPointsConfig
from .contracts import LoadPointsInput, LoadPointsOutput

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xyz", ".txt", ".pts", ".csv")


class LoadPointsStep(BaseStep[LoadPointsInput, LoadPointsOutput, LoadPointsConfig]):
    """Parse a text point file and write a normalized copy plus metadata."""

    name: ClassVar[str] = "load_points"
    input_type: ClassVar = LoadPointsInput
    output_type: ClassVar = LoadPointsOutput
    config_type: ClassVar = LoadPointsConfig

    def validate_inputs(self, inputs: LoadPointsInput) -> bool:
        if not inputs.xyz_path.exists():
            logger.error(f"Point file not found: {inputs.xyz_path}")
            return False
        if inputs.xyz_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            logger.error(f"Expected one of {SUPPORTED_SUFFIXES}, got: {inputs.xyz_path.suffix}")
            return False
        return True

    def run(self, inputs: LoadPointsInput) -> LoadPointsOutput:
        output_dir = self.interim_dir("s00_load_points")

        points = read_xyz(inputs.xyz_path)
        if len(points) < self.config.min_points:
            raise RuntimeError(
                f"Parsed {len(points)} points from {inputs.xyz_path}, "
                f"need at least {self.config.min_points}"
            )

        if self.config.invert_elevation:
            points = invert_elevation(points)
            logger.info("Inverted elevation on load")

        num_colored = count_colored(points)
        if 0 < num_colored < len(points):
            logger.warning(f"Mixed color presence: {num_colored}/{len(points)} points colored")

        points_path = write_xyz(output_dir / "points.xyz", points, self.config.decimal_places)

        bounds = bounding_box(points)
        metadata = {
            "source": str(inputs.xyz_path),
            "num_points": len(points),
            "num_colored": num_colored,
            "bounds_min": bounds[0],
            "bounds_max": bounds[1],
            "inverted_elevation": self.config.invert_elevation,
        }
        metadata_path = output_dir / "metadata.json"
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)

        return LoadPointsOutput(
            points_path=points_path,
            metadata_path=metadata_path,
            num_points=len(points),
        )
