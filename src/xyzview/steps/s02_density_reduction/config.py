"""Configuration for Step 02: Density reduction."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class DensityReductionConfig(BaseModel):
    method: Literal["voxel", "gradient"] = Field(
        "voxel",
        description="'voxel': voxel-centroid downsampling, 'gradient': keep steep-elevation points",
    )
    target_percentage: float = Field(
        50.0, gt=0, le=100, description="Percentage of the original points to retain"
    )
    preserve_boundary: bool = Field(True, description="Never drop boundary points")
    boundary_mode: Literal["horizontal", "volumetric"] = Field(
        "horizontal",
        description="Boundary mode used when preserving boundary without a boundary_file",
    )
    seed: Optional[int] = Field(42, description="Random seed for gradient sampling (None = entropy)")
    decimal_places: int = Field(10, ge=0, le=17, description="Precision of reduced.xyz")
