from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, Field


class ConvertResponse(BaseModel):
    """Body returned by ``POST /api/convert`` on success."""

    file: str = Field(..., description="Converted file, base64 encoded")
    type: str = Field(..., description="MIME type of the converted file")
    name: str = Field(..., description="Suggested download filename")


class FormatsResponse(BaseModel):
    input_formats: List[str]
    output_formats: Dict[str, List[str]]


class HealthResponse(BaseModel):
    status: Literal["ok"]
