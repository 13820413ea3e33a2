"""Resize policy: target geometry from source geometry and constraints.

Every function here is pure. The arithmetic deliberately truncates
instead of rounding so that output dimensions are byte-for-byte
reproducible across implementations:

    - width-bound:  h' = int(h * W / w)          (float ratio, truncated)
    - contain:      h' = h * W // w, then w' = w * H // h if h' > H
    - letterbox:    offset = int((canvas - source) / 2) per axis
    - crop height:  int(w / aspect_ratio), or min_height when below cap
"""

from __future__ import annotations

from collections.abc import Iterator

from visualprep.geometry.primitives import Offset, Region, Size


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")


def _halve_toward_zero(value: int) -> int:
    # Floor division rounds -3 // 2 to -2; centering uses truncation.
    return int(value / 2)


def derive_crop_height(
    source_width: int,
    aspect_ratio: float,
    max_height: int,
    min_height: int,
) -> int:
    """Derive the band height used to slice a tall image.

    The aspect-derived height is ``int(source_width / aspect_ratio)``. When
    that is already below ``max_height`` the band would be short, so
    ``min_height`` is used instead to avoid a long run of thin segments.

    Args:
        source_width: Width of the source image in pixels.
        aspect_ratio: Target width/height ratio of each segment.
        max_height: Height cap below which the fallback applies.
        min_height: Fallback band height.

    Returns:
        Crop height (>= 1) applied to every segment of one image.

    Raises:
        ValueError: If any argument is not positive.
    """
    _require_positive(
        source_width=source_width,
        aspect_ratio=aspect_ratio,
        max_height=max_height,
        min_height=min_height,
    )
    crop_height = int(source_width / aspect_ratio)
    if crop_height < max_height:
        crop_height = min_height
    return crop_height


def derive_width_bound_size(source: Size, target_width: int) -> Size:
    """Scale ``source`` so its width equals ``target_width``.

    Height follows the simple ratio ``int(h * target_width / w)``, clamped
    to at least one pixel for extremely wide sources.
    """
    _require_positive(target_width=target_width)
    height = int(source.height * target_width / source.width)
    return Size(width=target_width, height=max(1, height))


def derive_contain_size(source: Size, max_width: int, max_height: int) -> Size:
    """Fit ``source`` inside a ``max_width x max_height`` box.

    Width is assumed binding first. If the resulting height overflows the
    box, height becomes binding and width is recomputed. Both branches use
    integer division, so one edge always equals the box edge exactly and
    the other is less than or equal to its box edge.

    Args:
        source: Source dimensions.
        max_width: Box width.
        max_height: Box height.

    Returns:
        Target dimensions (may be larger than the source).

    Raises:
        ValueError: If the box is not positive.
    """
    _require_positive(max_width=max_width, max_height=max_height)

    new_width = max_width
    new_height = source.height * max_width // source.width

    if new_height > max_height:
        new_height = max_height
        new_width = source.width * max_height // source.height

    return Size(width=max(1, new_width), height=max(1, new_height))


def derive_letterbox_offset(canvas: Size, source: Size) -> Offset:
    """Offset that centers ``source`` on ``canvas``.

    Negative when the source is larger than the canvas along an axis;
    clipping is left to the drawing primitive.
    """
    return Offset(
        x=_halve_toward_zero(canvas.width - source.width),
        y=_halve_toward_zero(canvas.height - source.height),
    )


def iter_slice_regions(source: Size, crop_height: int) -> Iterator[Region]:
    """Yield full-width bands of ``crop_height`` rows from top to bottom.

    Only complete bands are produced: the trailing
    ``source.height % crop_height`` rows are dropped.
    """
    _require_positive(crop_height=crop_height)
    y = 0
    while y + crop_height <= source.height:
        yield Region(x=0, y=y, width=source.width, height=crop_height)
        y += crop_height
