"""Geometry module for visualprep.

This package provides the size/offset/region primitives and the resize
policy that every image operation delegates its dimension math to.

Key Components:
    - Primitives: Size, Offset, Region models in source-pixel coordinates
    - Policy: crop height, width-bound, contain and letterbox computations

Example:
    from visualprep.geometry import Size, derive_contain_size

    derive_contain_size(Size(width=500, height=2000), 1000, 500)
    # Size(width=125, height=500)
"""

from visualprep.geometry.policy import (
    derive_contain_size,
    derive_crop_height,
    derive_letterbox_offset,
    derive_width_bound_size,
    iter_slice_regions,
)
from visualprep.geometry.primitives import Offset, Region, Size

__all__ = [
    "Offset",
    "Region",
    "Size",
    "derive_contain_size",
    "derive_crop_height",
    "derive_letterbox_offset",
    "derive_width_bound_size",
    "iter_slice_regions",
]
