"""Pillow implementation of the imaging capability protocols."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from visualprep.config import settings
from visualprep.geometry import Offset, Region, Size
from visualprep.imaging.exceptions import DecodeError, EncodeError
from visualprep.imaging.types import ImageFormat, ResampleFilter

# Modes each format can store as-is. Anything else is converted to RGBA
# when the image carries alpha and the format keeps it, otherwise to RGB.
_STORABLE_MODES: dict[ImageFormat, frozenset[str]] = {
    ImageFormat.png: frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}),
    ImageFormat.jpeg: frozenset({"RGB", "L", "CMYK"}),
    ImageFormat.bmp: frozenset({"RGB", "L", "P", "1"}),
}

_ALPHA_MODES = frozenset({"RGBA", "RGBa", "LA", "La", "PA"})


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in _ALPHA_MODES or "transparency" in image.info


def _storable(image: Image.Image, target: ImageFormat) -> Image.Image:
    storable = _STORABLE_MODES.get(target)
    if storable is None or image.mode in storable:
        return image
    if "RGBA" in storable and _has_alpha(image):
        return image.convert("RGBA")
    return image.convert("RGB")


class PillowBackend:
    """Decoder, Resizer and Canvas backed by Pillow.

    Usage:
        backend = PillowBackend()
        image = backend.open(Path("panel.png"))
        small = backend.resize(image, Size(width=100, height=50), ResampleFilter.lanczos)
        backend.save(small, Path("panel_small.jpg"))

    Pillow refuses to decode images above ``2 * MAX_IMAGE_PIXELS`` pixels.
    That limit is process-wide in Pillow, so each ``open`` applies this
    backend's limit before decoding.
    """

    __slots__ = ("_max_pixels",)

    def __init__(self, max_image_pixels: int | None = None) -> None:
        """Initialize the backend.

        Args:
            max_image_pixels: Decompression-bomb threshold. Defaults to
                settings.MAX_IMAGE_PIXELS; 0 disables the check.
        """
        if max_image_pixels is None:
            max_image_pixels = settings.MAX_IMAGE_PIXELS
        self._max_pixels = max_image_pixels or None

    def open(self, path: Path) -> Image.Image:
        """Decode ``path`` fully into memory and release the file handle.

        Raises:
            DecodeError: If the file does not exist, cannot be decoded, or
                exceeds the decompression-bomb limit.
        """
        path = Path(path)
        if not path.is_file():
            raise DecodeError("File not found", path=path)

        Image.MAX_IMAGE_PIXELS = self._max_pixels
        try:
            with Image.open(path) as opened:
                opened.load()
                return opened.copy()
        except Image.DecompressionBombError as e:
            raise DecodeError(f"Image too large to decode: {e}", path=path) from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise DecodeError(f"Failed to decode image: {e}", path=path) from e

    def save(
        self,
        image: Image.Image,
        path: Path,
        image_format: ImageFormat | None = None,
    ) -> None:
        """Encode ``image`` to ``path``, converting modes the format can't store.

        Raises:
            EncodeError: If the format is unsupported or the write fails.
        """
        path = Path(path)
        try:
            target = image_format or ImageFormat.from_path(path)
        except ValueError as e:
            raise EncodeError(str(e), path=path) from e

        image = _storable(image, target)

        try:
            image.save(path, format=target.pillow_format)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Failed to save image: {e}", path=path) from e

    def resize(
        self,
        image: Image.Image,
        size: Size,
        resample: ResampleFilter,
    ) -> Image.Image:
        """Resample to exactly ``size``."""
        return image.resize(size.to_tuple(), resample=resample.pillow_filter)

    def crop(self, image: Image.Image, region: Region) -> Image.Image:
        """Copy out ``region``."""
        return image.crop(region.to_box())

    def new_canvas(
        self,
        size: Size,
        color: tuple[int, int, int],
    ) -> Image.Image:
        """Create an RGB canvas filled with ``color``."""
        return Image.new("RGB", size.to_tuple(), color)

    def draw(self, canvas: Image.Image, image: Image.Image, offset: Offset) -> None:
        """Paste ``image`` at ``offset``; Pillow clips out-of-bounds pixels."""
        if image.mode in ("RGBA", "LA") or (
            image.mode == "P" and "transparency" in image.info
        ):
            rgba = image.convert("RGBA")
            canvas.paste(rgba, offset.to_tuple(), mask=rgba)
        else:
            canvas.paste(image.convert(canvas.mode), offset.to_tuple())
