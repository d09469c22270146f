"""
Export Request

The payload handed to the encoding backend. Crop coordinates are whole
pixels and selection bounds are rounded to milliseconds.
"""

from pydantic import BaseModel, Field


class CropArea(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class SelectionRange(BaseModel):
    start: float = Field(ge=0)
    end: float = Field(gt=0)


class ExportRequest(BaseModel):
    input_path: str
    output_path: str
    crop: CropArea
    selection: SelectionRange
