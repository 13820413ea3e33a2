"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from visualprep.config import Settings
from visualprep.geometry import Offset, Region, Size
from visualprep.imaging.exceptions import DecodeError, EncodeError
from visualprep.imaging.types import ImageFormat, ResampleFilter
from visualprep.utils.logging import clear_correlation_context, configure_logging


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


class FakeImage:
    """Pixel-free stand-in for PIL.Image.Image that only tracks its size."""

    def __init__(self, size: tuple[int, int], mode: str = "RGB") -> None:
        self.size = size
        self.width, self.height = size
        self.mode = mode

    def crop(self, box: tuple[int, int, int, int]) -> FakeImage:
        left, top, right, bottom = box
        return FakeImage((right - left, bottom - top), self.mode)


@dataclass
class FakeBackend:
    """In-memory imaging backend that records every requested operation.

    Attributes:
        sources: Size of each decodable path; other paths raise DecodeError.
        fail_on_save: Save call index (0-based) that raises EncodeError.
    """

    sources: dict[Path, tuple[int, int]] = field(default_factory=dict)
    fail_on_save: int | None = None
    opened: list[Path] = field(default_factory=list)
    crops: list[Region] = field(default_factory=list)
    resizes: list[tuple[Size, ResampleFilter]] = field(default_factory=list)
    canvases: list[tuple[Size, tuple[int, int, int]]] = field(default_factory=list)
    draws: list[tuple[tuple[int, int], Offset]] = field(default_factory=list)
    saves: list[tuple[Path, tuple[int, int], ImageFormat | None]] = field(
        default_factory=list
    )

    def open(self, path: Path) -> FakeImage:
        self.opened.append(path)
        if path not in self.sources:
            raise DecodeError("File not found", path=path)
        return FakeImage(self.sources[path])

    def save(
        self,
        image: FakeImage,
        path: Path,
        image_format: ImageFormat | None = None,
    ) -> None:
        if self.fail_on_save is not None and len(self.saves) == self.fail_on_save:
            raise EncodeError("Disk full", path=path)
        self.saves.append((path, image.size, image_format))

    def resize(
        self,
        image: FakeImage,
        size: Size,
        resample: ResampleFilter,
    ) -> FakeImage:
        self.resizes.append((size, resample))
        return FakeImage(size.to_tuple(), image.mode)

    def crop(self, image: FakeImage, region: Region) -> FakeImage:
        self.crops.append(region)
        return image.crop(region.to_box())

    def new_canvas(self, size: Size, color: tuple[int, int, int]) -> FakeImage:
        self.canvases.append((size, color))
        return FakeImage(size.to_tuple())

    def draw(self, canvas: FakeImage, image: FakeImage, offset: Offset) -> None:
        self.draws.append((image.size, offset))


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Empty FakeBackend; register sources via ``fake_backend.sources``."""
    return FakeBackend()
