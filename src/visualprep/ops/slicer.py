"""Slice tall images into equal-height segments.

The slicer decodes the source once, derives a single crop height from the
source width and the requested aspect ratio, and writes one file per
complete band, named after the band's top row (``0.png``, ``250.png``...).

Tail Behavior:
    Rows below the last complete band (``height % crop_height``) are never
    written. This keeps every segment the same size.

Partial Failure:
    Writing stops at the first error. Files already written are kept and
    reported in ``SliceResult.output_files``; call ``SliceResult.discard()``
    if the caller needs all-or-nothing output.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from visualprep.geometry import Size, derive_crop_height, iter_slice_regions
from visualprep.imaging.backend import PillowBackend
from visualprep.imaging.exceptions import EncodeError, MediaError
from visualprep.imaging.types import ImageBackend
from visualprep.ops.requests import SliceRequest
from visualprep.utils.logging import get_logger, operation_context

logger = get_logger(__name__)


@dataclass(frozen=True)
class SliceResult:
    """Outcome of one slicing run.

    Attributes:
        output_files: Segments written, in top-to-bottom order.
        crop_height: Band height used, or None if the source never decoded.
        error: First error encountered, or None on success.
    """

    output_files: tuple[Path, ...]
    crop_height: int | None
    error: MediaError | None = None

    @property
    def ok(self) -> bool:
        """True when every complete band was written."""
        return self.error is None

    def raise_for_error(self) -> None:
        """Re-raise the stored error, if any."""
        if self.error is not None:
            raise self.error

    def discard(self) -> list[Path]:
        """Delete every written segment.

        Returns:
            Paths that were actually removed.
        """
        removed = []
        for path in self.output_files:
            if path.exists():
                path.unlink()
                removed.append(path)
        return removed


def slice_image(
    request: SliceRequest,
    backend: ImageBackend | None = None,
) -> SliceResult:
    """Slice ``request.source_path`` into bands under ``request.output_dir``.

    Args:
        request: Slice parameters. Its ``output_files`` list is appended to
            as each segment is written.
        backend: Imaging backend; defaults to PillowBackend.

    Returns:
        SliceResult carrying the written files and the first error, if any.
        Decode and encode failures are reported through the result rather
        than raised.
    """
    backend = backend or PillowBackend()
    with operation_context(source=request.source_path):
        return _slice_bands(request, backend)


def _slice_bands(request: SliceRequest, backend: ImageBackend) -> SliceResult:
    try:
        image = backend.open(request.source_path)
    except MediaError as e:
        logger.error("Slice source could not be decoded", error=str(e))
        return SliceResult(output_files=(), crop_height=None, error=e)

    source = Size.from_tuple(image.size)
    crop_height = derive_crop_height(
        source.width,
        request.aspect_ratio,
        request.max_height,
        request.min_height,
    )
    logger.info(
        "Slicing image",
        width=source.width,
        height=source.height,
        crop_height=crop_height,
        dropped_rows=source.height % crop_height,
    )

    written: list[Path] = []
    try:
        request.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        error = EncodeError(f"Cannot create output directory: {e}", request.output_dir)
        logger.error("Slice output directory unavailable", error=str(error))
        return SliceResult(output_files=(), crop_height=crop_height, error=error)

    for index, region in enumerate(iter_slice_regions(source, crop_height)):
        output_path = request.output_file_name(region.y)
        with operation_context(segment=index):
            segment = backend.crop(image, region)
            try:
                backend.save(segment, output_path, request.output_format)
            except MediaError as e:
                logger.error(
                    "Slice aborted; partial output kept",
                    written=len(written),
                    error=str(e),
                )
                return SliceResult(
                    output_files=tuple(written),
                    crop_height=crop_height,
                    error=e,
                )

            written.append(output_path)
            request.output_files.append(output_path)
            logger.debug("Segment written", y=region.y, path=str(output_path))

    logger.info("Slicing complete", segments=len(written))
    return SliceResult(output_files=tuple(written), crop_height=crop_height)
