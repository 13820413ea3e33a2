"""Fixtures for integration tests.

These tests run the real Pillow backend against files under tmp_path.
Video tests additionally need an ffmpeg binary on PATH and are skipped
when none is available.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

pytestmark = pytest.mark.integration


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a solid-color image to tmp_path."""

    def _make(
        name: str,
        size: tuple[int, int],
        color: tuple[int, ...] = (200, 10, 10),
        mode: str = "RGB",
    ) -> Path:
        path = tmp_path / name
        Image.new(mode, size, color=color).save(path)
        return path

    return _make


@pytest.fixture
def ffmpeg_binary() -> str:
    """Path of a usable ffmpeg, skipping the test if none is installed."""
    binary = shutil.which("ffmpeg")
    if binary is None:
        pytest.skip("ffmpeg not installed")
    return binary
