"""Step 03: Export the processed cloud to data_root/processed."""

from __future__ import annotations

import logging
from typing import ClassVar

from xyzview.core.step_base import BaseStep
from xyzview.utils.geometry import invert_elevation
from xyzview.utils.io import read_xyz, write_xyz
from .config import ExportConfig
from .contracts import ExportInput, ExportOutput

logger = logging.getLogger(__name__)


class ExportStep(BaseStep[ExportInput, ExportOutput, ExportConfig]):
    name: ClassVar[str] = "export"
    input_type: ClassVar = ExportInput
    output_type: ClassVar = ExportOutput
    config_type: ClassVar = ExportConfig

    def validate_inputs(self, inputs: ExportInput) -> bool:
        if not inputs.points_path.exists():
            logger.error(f"Points file not found: {inputs.points_path}")
            return False
        return True

    def run(self, inputs: ExportInput) -> ExportOutput:
        points = read_xyz(inputs.points_path)
        if self.config.invert_elevation:
            points = invert_elevation(points)

        output_path = self.data_root / "processed" / self.config.output_name
        write_xyz(output_path, points, self.config.decimal_places)

        return ExportOutput(output_path=output_path, num_points=len(points))
