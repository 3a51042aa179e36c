"""
Pydantic Models and Schemas
===========================

Data models for the render pipeline: the resource store served to the
browser, the output image format and the parameters of one render.
"""

from enum import Enum
from pathlib import PurePath
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class ImageFormat(str, Enum):
    """Supported output image formats."""
    PNG = "png"
    SVG = "svg"

    @classmethod
    def from_path(cls, path: Union[str, PurePath]) -> "ImageFormat":
        """
        Pick the format from the file extension of ``path``.

        ``.svg`` in any letter case selects SVG; every other extension,
        including none, selects PNG.
        """
        if PurePath(path).suffix.lower() == ".svg":
            return cls.SVG
        return cls.PNG


class ResourceStore(BaseModel):
    """Resources served to the browser for one conversion."""
    model_config = ConfigDict(frozen=True)

    font: bytes = Field(..., description="Font used by the HTML page")
    style: bytes = Field(..., description="CSS styles used by the HTML page")
    config: bytes = Field(..., description="Mermaid configuration as JSON")
    diagram: bytes = Field(..., description="Mermaid diagram source as UTF-8")
    render_library: bytes = Field(..., description="Mermaid.js bundle")


class RenderRequest(BaseModel):
    """Parameters of a single render, fixed for the whole conversion."""
    model_config = ConfigDict(frozen=True)

    width: PositiveInt = Field(..., description="Viewport width in pixels")
    height: PositiveInt = Field(..., description="Viewport height in pixels")
    format: ImageFormat = Field(default=ImageFormat.PNG, description="Output format")
    port: int = Field(..., ge=1, le=65535, description="Asset server port")

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}/"
