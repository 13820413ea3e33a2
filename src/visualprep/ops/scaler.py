"""Whole-image scaling operations.

Three policies, each writing a single output file:

    - scale_down_by_width: shrink to a target width; no-op if already narrow
    - scale_by_resolution: "contain" resize into a box, up or down
    - scale_up_and_fill: center the unscaled image on a solid canvas (PNG)
"""

from __future__ import annotations

from pathlib import Path

from visualprep.geometry import (
    Size,
    derive_contain_size,
    derive_letterbox_offset,
    derive_width_bound_size,
)
from visualprep.imaging.backend import PillowBackend
from visualprep.imaging.types import ImageBackend, ImageFormat
from visualprep.ops.requests import (
    ContainScaleRequest,
    LetterboxRequest,
    WidthScaleRequest,
)
from visualprep.utils.logging import get_logger, operation_context

logger = get_logger(__name__)


def scale_down_by_width(
    request: WidthScaleRequest,
    backend: ImageBackend | None = None,
) -> Path | None:
    """Shrink an image to ``request.width`` while keeping its aspect ratio.

    If the source is already no wider than the target, nothing is written
    and None is returned. That is a success, not an error: callers must not
    assume the output file exists afterwards.

    Args:
        request: Width-bound scale parameters.
        backend: Imaging backend; defaults to PillowBackend.

    Returns:
        The written output path, or None when no resize was needed.

    Raises:
        DecodeError: If the source cannot be decoded.
        EncodeError: If the output cannot be written.
    """
    backend = backend or PillowBackend()
    with operation_context(source=request.source_path):
        image = backend.open(request.source_path)
        source = Size.from_tuple(image.size)

        if source.width <= request.width:
            logger.debug(
                "Source already within target width; skipping",
                width=source.width,
                target_width=request.width,
            )
            return None

        target = derive_width_bound_size(source, request.width)
        resized = backend.resize(image, target, request.resample)
        backend.save(resized, request.output_path)

        logger.info(
            "Scaled down by width",
            source_size=source.to_tuple(),
            output_size=target.to_tuple(),
            path=str(request.output_path),
        )
        return request.output_path


def scale_by_resolution(
    request: ContainScaleRequest,
    backend: ImageBackend | None = None,
) -> Path:
    """Resize an image to fit inside ``max_width x max_height``.

    Always resamples, enlarging small sources and shrinking large ones.
    The binding edge matches the box exactly; the other stays within it.

    Raises:
        DecodeError: If the source cannot be decoded.
        EncodeError: If the output cannot be written.
    """
    backend = backend or PillowBackend()
    with operation_context(source=request.source_path):
        image = backend.open(request.source_path)
        source = Size.from_tuple(image.size)
        target = derive_contain_size(source, request.max_width, request.max_height)

        resized = backend.resize(image, target, request.resample)
        backend.save(resized, request.output_path)

        logger.info(
            "Scaled to fit box",
            source_size=source.to_tuple(),
            box=(request.max_width, request.max_height),
            output_size=target.to_tuple(),
            path=str(request.output_path),
        )
        return request.output_path


def scale_up_and_fill(
    request: LetterboxRequest,
    backend: ImageBackend | None = None,
) -> Path:
    """Center the unscaled source on a ``width x height`` canvas of ``fill``.

    The source is not resampled. When it is larger than the canvas the
    offset goes negative and the overflow is clipped. Output is always PNG,
    whatever the output path's extension.

    Raises:
        DecodeError: If the source cannot be decoded.
        EncodeError: If the output cannot be written.
    """
    backend = backend or PillowBackend()
    with operation_context(source=request.source_path):
        image = backend.open(request.source_path)
        source = Size.from_tuple(image.size)
        canvas_size = Size(width=request.width, height=request.height)

        canvas = backend.new_canvas(canvas_size, request.fill)
        offset = derive_letterbox_offset(canvas_size, source)
        backend.draw(canvas, image, offset)
        backend.save(canvas, request.output_path, ImageFormat.png)

        if offset.x < 0 or offset.y < 0:
            logger.warning(
                "Source larger than canvas; edges clipped",
                source_size=source.to_tuple(),
                canvas_size=canvas_size.to_tuple(),
            )
        logger.info(
            "Letterboxed image",
            offset=offset.to_tuple(),
            canvas_size=canvas_size.to_tuple(),
            path=str(request.output_path),
        )
        return request.output_path
