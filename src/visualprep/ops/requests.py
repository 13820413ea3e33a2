"""Request records for the image operations.

Each operation takes exactly one of these validated models. They carry
only paths and parameters; decoding happens inside the operation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Self

from PIL import ImageColor
from pydantic import BaseModel, Field, field_validator, model_validator

from visualprep.config import settings
from visualprep.imaging.types import ImageFormat, ResampleFilter


def _default_resample() -> ResampleFilter:
    return ResampleFilter(settings.DEFAULT_RESAMPLE)


class SliceRequest(BaseModel):
    """Input for slicing a tall image into equal-height segments.

    ``output_files`` is appended to by the slicer, in order, once per
    segment that was written successfully.
    """

    source_path: Path
    output_dir: Path
    max_height: int = Field(..., gt=0)
    min_height: int = Field(..., gt=0)
    aspect_ratio: float = Field(..., gt=0)
    output_format: ImageFormat = Field(
        default_factory=lambda: ImageFormat(settings.SLICE_OUTPUT_FORMAT)
    )
    output_files: list[Path] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_height_bounds(self) -> Self:
        if self.min_height > self.max_height:
            raise ValueError(
                f"min_height ({self.min_height}) must not exceed "
                f"max_height ({self.max_height})"
            )
        return self

    def output_file_name(self, y: int) -> Path:
        """Path of the segment whose top edge is at row ``y``."""
        return self.output_dir / f"{y}.{self.output_format.extension}"


class WidthScaleRequest(BaseModel, frozen=True):
    """Input for downscaling an image to a target width."""

    source_path: Path
    output_path: Path
    width: int = Field(..., gt=0)
    resample: ResampleFilter = Field(default_factory=_default_resample)


class ContainScaleRequest(BaseModel, frozen=True):
    """Input for resizing an image to fit inside a bounding box."""

    source_path: Path
    output_path: Path
    max_width: int = Field(..., gt=0)
    max_height: int = Field(..., gt=0)
    resample: ResampleFilter = Field(default_factory=_default_resample)


class LetterboxRequest(BaseModel, frozen=True):
    """Input for centering an image on a solid-color canvas.

    ``fill`` accepts an RGB/RGBA tuple or any color string Pillow
    understands ("black", "#1e1e1e", "rgb(10, 20, 30)"). It is normalized
    to an RGB tuple; alpha is discarded because the canvas is opaque.
    """

    source_path: Path
    output_path: Path
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    fill: tuple[int, int, int] = Field(
        default_factory=lambda: ImageColor.getrgb(settings.LETTERBOX_FILL)[:3]
    )

    @field_validator("fill", mode="before")
    @classmethod
    def _normalize_fill(cls, value: object) -> object:
        if isinstance(value, str):
            return ImageColor.getrgb(value)[:3]
        if isinstance(value, (tuple, list)) and len(value) == 4:  # noqa: PLR2004
            return tuple(value[:3])
        return value

    @field_validator("fill")
    @classmethod
    def _validate_channels(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        if any(not 0 <= channel <= 255 for channel in value):  # noqa: PLR2004
            raise ValueError(f"fill channels must be within 0-255, got {value}")
        return value


class ConvertRequest(BaseModel, frozen=True):
    """Input for re-encoding an image under the output path's format."""

    source_path: Path
    output_path: Path
