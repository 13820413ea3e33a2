"""Image operations for visualprep.

Each operation decodes one source, asks the geometry policy for target
dimensions, and writes its output through an injectable imaging backend.

Public API:
    - slice_image / SliceResult: equal-height segmentation of tall images
    - scale_down_by_width: width-bound downscale (no-op when already narrow)
    - scale_by_resolution: contain resize into a box
    - scale_up_and_fill: letterbox onto a solid canvas
    - convert_image: format conversion
"""

from visualprep.ops.converter import convert_image
from visualprep.ops.requests import (
    ContainScaleRequest,
    ConvertRequest,
    LetterboxRequest,
    SliceRequest,
    WidthScaleRequest,
)
from visualprep.ops.scaler import (
    scale_by_resolution,
    scale_down_by_width,
    scale_up_and_fill,
)
from visualprep.ops.slicer import SliceResult, slice_image

__all__ = [
    "ContainScaleRequest",
    "ConvertRequest",
    "LetterboxRequest",
    "SliceRequest",
    "SliceResult",
    "WidthScaleRequest",
    "convert_image",
    "scale_by_resolution",
    "scale_down_by_width",
    "scale_up_and_fill",
    "slice_image",
]
