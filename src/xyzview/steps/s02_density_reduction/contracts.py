"""I/O contracts for Step 02: Density reduction."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class DensityReductionInput(BaseModel):
    points_path: Path = Field(..., description="Path to the original points.xyz from s00")
    boundary_file: Optional[Path] = Field(
        None, description="Path to boundary.json from s01 (optional)"
    )


class DensityReductionOutput(BaseModel):
    points_path: Path = Field(..., description="Path to reduced.xyz")
    stats_path: Path = Field(..., description="Path to reduction.json")
    num_input_points: int = Field(0)
    num_points: int = Field(0, description="Number of points after reduction")
