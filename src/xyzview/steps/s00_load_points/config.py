"""Configuration for Step 00: Load XYZ point file."""

from pydantic import BaseModel, Field


class LoadPointsConfig(BaseModel):
    invert_elevation: bool = Field(False, description="Negate z on load (depth-positive sources)")
    decimal_places: int = Field(10, ge=0, le=17, description="Precision of the normalized points.xyz")
    min_points: int = Field(1, ge=1, description="Fail if fewer points than this are parsed")
