"""Type definitions for the imaging layer.

Contains the format and resample enums plus the capability protocols the
operations are written against. PillowBackend implements all three
protocols; tests substitute fakes that record the requested geometry.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol

from PIL import Image

from visualprep.geometry import Offset, Region, Size


class ImageFormat(str, Enum):
    """Output raster formats supported by the codec."""

    png = "png"
    jpeg = "jpeg"
    gif = "gif"
    bmp = "bmp"
    tiff = "tiff"
    webp = "webp"

    @property
    def extension(self) -> str:
        """File extension (without dot) used for generated file names."""
        return self.value

    @property
    def pillow_format(self) -> str:
        """Format name understood by ``Image.save``."""
        return self.value.upper()

    @classmethod
    def from_path(cls, path: str | Path) -> ImageFormat:
        """Infer the format from a file extension.

        Raises:
            ValueError: If the extension is missing or unsupported.
        """
        suffix = Path(path).suffix.lower().lstrip(".")
        aliases = {"jpg": "jpeg", "tif": "tiff"}
        try:
            return cls(aliases.get(suffix, suffix))
        except ValueError:
            raise ValueError(
                f"Unsupported image extension '{suffix}'. "
                f"Supported: {', '.join(f.value for f in cls)}"
            ) from None


class ResampleFilter(str, Enum):
    """Resampling kernels, from fastest to highest quality."""

    nearest = "nearest"
    box = "box"
    bilinear = "bilinear"
    hamming = "hamming"
    bicubic = "bicubic"
    lanczos = "lanczos"

    @property
    def pillow_filter(self) -> Image.Resampling:
        """Matching ``Image.Resampling`` member."""
        return Image.Resampling[self.name.upper()]


class Decoder(Protocol):
    """Codec capability: load and store rasters by path."""

    def open(self, path: Path) -> Image.Image:
        """Decode the image at ``path``.

        Raises:
            DecodeError: If the file is missing, unreadable or corrupt.
        """
        ...

    def save(
        self,
        image: Image.Image,
        path: Path,
        image_format: ImageFormat | None = None,
    ) -> None:
        """Encode ``image`` to ``path``.

        The explicit format wins over the path extension.

        Raises:
            EncodeError: If the image cannot be written.
        """
        ...


class Resizer(Protocol):
    """Resample capability."""

    def resize(
        self,
        image: Image.Image,
        size: Size,
        resample: ResampleFilter,
    ) -> Image.Image:
        """Return ``image`` resampled to exactly ``size``."""
        ...

    def crop(self, image: Image.Image, region: Region) -> Image.Image:
        """Return the pixels of ``region``."""
        ...


class Canvas(Protocol):
    """Drawing capability."""

    def new_canvas(
        self,
        size: Size,
        color: tuple[int, int, int],
    ) -> Image.Image:
        """Create an opaque RGB canvas entirely filled with ``color``."""
        ...

    def draw(self, canvas: Image.Image, image: Image.Image, offset: Offset) -> None:
        """Paint ``image`` onto ``canvas`` at ``offset``, clipping at the edges."""
        ...


class ImageBackend(Decoder, Resizer, Canvas, Protocol):
    """All capabilities the operations need, as one injectable object."""

    pass
