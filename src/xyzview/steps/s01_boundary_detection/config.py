"""Configuration for Step 01: Boundary detection."""

from typing import Literal

from pydantic import BaseModel, Field


class BoundaryDetectionConfig(BaseModel):
    mode: Literal["horizontal", "volumetric"] = Field(
        "horizontal",
        description="'horizontal': 2D hull of the (x, y) projection, 'volumetric': 3D hull",
    )
    include_stacked: bool = Field(
        False,
        description="Horizontal mode: also mark points sharing (x, y) with a hull vertex",
    )
    export_marked: bool = Field(
        True, description="Write boundary_marked.xyz (boundary red, interior white)"
    )
    decimal_places: int = Field(6, ge=0, le=17, description="Precision of boundary_marked.xyz")
