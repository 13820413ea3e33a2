"""Imaging layer for visualprep.

This package wraps the Pillow codec, resampler and drawing primitives
behind small capability protocols so the operations in
``visualprep.ops`` can be exercised with in-memory fakes.

Key Components:
    - PillowBackend: Decoder + Resizer + Canvas on top of Pillow
    - ImageFormat / ResampleFilter: enums for output format and kernel
    - DecodeError / EncodeError / SubprocessError: error taxonomy
"""

from visualprep.imaging.backend import PillowBackend
from visualprep.imaging.exceptions import (
    DecodeError,
    EncodeError,
    EncoderTimeoutError,
    MediaError,
    SubprocessError,
)
from visualprep.imaging.types import (
    Canvas,
    Decoder,
    ImageBackend,
    ImageFormat,
    ResampleFilter,
    Resizer,
)

__all__ = [
    "Canvas",
    "DecodeError",
    "Decoder",
    "EncodeError",
    "EncoderTimeoutError",
    "ImageBackend",
    "ImageFormat",
    "MediaError",
    "PillowBackend",
    "ResampleFilter",
    "Resizer",
    "SubprocessError",
]
