"""Re-encode an image into the format named by the output extension."""

from __future__ import annotations

from pathlib import Path

from visualprep.imaging.backend import PillowBackend
from visualprep.imaging.types import Decoder
from visualprep.ops.requests import ConvertRequest
from visualprep.utils.logging import get_logger, operation_context

logger = get_logger(__name__)


def convert_image(request: ConvertRequest, codec: Decoder | None = None) -> Path:
    """Decode ``request.source_path`` and save it to ``request.output_path``.

    Geometry is unchanged. The supported formats are whatever the codec
    can read and write.

    Raises:
        DecodeError: If the source cannot be decoded.
        EncodeError: If the extension is unsupported or the write fails.
    """
    codec = codec or PillowBackend()
    with operation_context(source=request.source_path):
        image = codec.open(request.source_path)
        codec.save(image, request.output_path)
        logger.info("Converted image", path=str(request.output_path))
        return request.output_path
