"""I/O contracts for Step 00: Load XYZ point file."""

from pathlib import Path

from pydantic import BaseModel, Field


class LoadPointsInput(BaseModel):
    xyz_path: Path = Field(..., description="Path to the source .xyz/.txt point file")


class LoadPointsOutput(BaseModel):
    points_path: Path = Field(..., description="Path to normalized points.xyz (comments and bad lines removed)")
    metadata_path: Path = Field(..., description="Path to metadata.json (counts, bounds)")
    num_points: int = Field(..., description="Number of parsed points")
