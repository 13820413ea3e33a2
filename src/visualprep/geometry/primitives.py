"""Geometry primitives for visualprep.

This module provides immutable Pydantic models for sizes, offsets and
regions in source-pixel coordinates. All coordinates follow the
convention where (0, 0) is the top-left corner.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field


class Size(BaseModel, frozen=True):
    """A 2D size representing width and height.

    Both dimensions must be strictly positive (> 0).

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def area(self) -> int:
        """Calculate the area in square pixels."""
        return self.width * self.height

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    @classmethod
    def from_tuple(cls, size: tuple[int, int]) -> Self:
        """Create Size from (width, height) tuple."""
        return cls(width=size[0], height=size[1])


class Offset(BaseModel, frozen=True):
    """Placement of an image's top-left corner on a canvas.

    Unlike Region coordinates, offsets may be negative: a source larger
    than its canvas is centered by shifting it up/left, and the drawing
    primitive clips whatever falls outside.
    """

    x: int
    y: int

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)


class Region(BaseModel, frozen=True):
    """A rectangular region inside a source image.

    The region is defined as:
    - Top-left: (x, y)
    - Bottom-right: (x + width, y + height) [exclusive]

    Attributes:
        x: Left edge X coordinate (>= 0).
        y: Top edge Y coordinate (>= 0).
        width: Horizontal extent in pixels (> 0).
        height: Vertical extent in pixels (> 0).
    """

    x: int = Field(..., ge=0, description="Left edge X coordinate")
    y: int = Field(..., ge=0, description="Top edge Y coordinate")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def right(self) -> int:
        """Return the X coordinate of the right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Return the Y coordinate of the bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def size(self) -> Size:
        """Return the dimensions as a Size."""
        return Size(width=self.width, height=self.height)

    def to_box(self) -> tuple[int, int, int, int]:
        """Convert to a (left, top, right, bottom) box as used by Pillow."""
        return (self.x, self.y, self.right, self.bottom)

    @classmethod
    def from_corners(
        cls,
        top_left: tuple[int, int],
        bottom_right: tuple[int, int],
    ) -> Self:
        """Create Region from corner coordinates.

        Args:
            top_left: (x, y) of top-left corner.
            bottom_right: (x, y) of bottom-right corner (exclusive).

        Returns:
            Region spanning the specified corners.

        Raises:
            ValueError: If bottom_right is not strictly greater than top_left.
        """
        x1, y1 = top_left
        x2, y2 = bottom_right
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)
