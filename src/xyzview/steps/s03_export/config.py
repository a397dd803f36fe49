"""Configuration for Step 03: Export."""

from pydantic import BaseModel, Field


class ExportConfig(BaseModel):
    invert_elevation: bool = Field(False, description="Negate z before writing")
    decimal_places: int = Field(6, ge=0, le=17, description="Fixed decimal precision of coordinates")
    output_name: str = Field("output.xyz", min_length=1, description="File name under data_root/processed")
