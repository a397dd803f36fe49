"""I/O contracts for Step 01: Boundary detection."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class BoundaryDetectionInput(BaseModel):
    points_path: Path = Field(..., description="Path to points.xyz from s00")


class BoundaryDetectionOutput(BaseModel):
    boundary_file: Path = Field(..., description="Path to boundary.json (mode, num_points, indices)")
    marked_points_path: Optional[Path] = Field(
        None, description="Path to boundary_marked.xyz (if export_marked)"
    )
    num_boundary_points: int = Field(0)
