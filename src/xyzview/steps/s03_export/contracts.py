"""I/O contracts for Step 03: Export."""

from pathlib import Path

from pydantic import BaseModel, Field


class ExportInput(BaseModel):
    points_path: Path = Field(..., description="Path to the points to export (reduced.xyz from s02)")


class ExportOutput(BaseModel):
    output_path: Path = Field(..., description="Path to the exported .xyz file")
    num_points: int = Field(0)
