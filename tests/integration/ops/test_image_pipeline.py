"""Integration tests for the image operations with the Pillow backend."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from visualprep.imaging.backend import PillowBackend
from visualprep.imaging.exceptions import DecodeError
from visualprep.ops import (
    ContainScaleRequest,
    ConvertRequest,
    LetterboxRequest,
    SliceRequest,
    WidthScaleRequest,
    convert_image,
    scale_by_resolution,
    scale_down_by_width,
    scale_up_and_fill,
    slice_image,
)

pytestmark = pytest.mark.integration

MakeImage = Callable[..., Path]


@pytest.mark.usefixtures("configure_test_logging")
class TestSlicePipeline:
    """Slicing real images on disk."""

    def test_slices_are_written_with_expected_size(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("tall.png", (400, 900))
        request = SliceRequest(
            source_path=source,
            output_dir=tmp_path / "segments",
            max_height=300,
            min_height=250,
            aspect_ratio=2.0,
        )

        result = slice_image(request)

        assert result.ok
        assert [path.name for path in result.output_files] == [
            "0.png",
            "250.png",
            "500.png",
        ]
        for path in result.output_files:
            with Image.open(path) as segment:
                assert segment.size == (400, 250)
                assert segment.format == "PNG"

    def test_jpeg_segments_from_rgba_source(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("alpha.png", (100, 200), (0, 0, 255, 128), mode="RGBA")
        request = SliceRequest(
            source_path=source,
            output_dir=tmp_path / "jpeg",
            max_height=1000,
            min_height=100,
            aspect_ratio=1.0,
            output_format="jpeg",
        )

        result = slice_image(request)

        assert result.ok
        assert len(result.output_files) == 2
        with Image.open(result.output_files[0]) as segment:
            assert segment.format == "JPEG"
            assert segment.mode == "RGB"

    def test_corrupt_source_reports_decode_error(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.png"
        source.write_bytes(b"not an image")
        request = SliceRequest(
            source_path=source,
            output_dir=tmp_path / "out",
            max_height=300,
            min_height=250,
            aspect_ratio=2.0,
        )

        result = slice_image(request)

        assert isinstance(result.error, DecodeError)
        assert result.output_files == ()


class TestScalePipeline:
    """Scaling real images on disk."""

    def test_scale_down_noop_writes_nothing(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("narrow.png", (300, 600))
        output = tmp_path / "narrow_small.png"

        written = scale_down_by_width(
            WidthScaleRequest(source_path=source, output_path=output, width=1080)
        )

        assert written is None
        assert not output.exists()

    def test_scale_down_preserves_aspect(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("wide.png", (2160, 3840))
        output = tmp_path / "wide_small.jpg"

        scale_down_by_width(
            WidthScaleRequest(source_path=source, output_path=output, width=1080)
        )

        with Image.open(output) as image:
            assert image.size == (1080, 1920)
            assert image.format == "JPEG"

    @pytest.mark.parametrize(
        ("source_size", "expected"),
        [((2000, 1000), (1000, 500)), ((500, 2000), (125, 500))],
    )
    def test_contain(
        self,
        make_image: MakeImage,
        tmp_path: Path,
        source_size: tuple[int, int],
        expected: tuple[int, int],
    ) -> None:
        source = make_image("src.png", source_size)
        output = tmp_path / "fit.png"
        box = (1000, 1000) if source_size[0] > source_size[1] else (1000, 500)

        scale_by_resolution(
            ContainScaleRequest(
                source_path=source,
                output_path=output,
                max_width=box[0],
                max_height=box[1],
            )
        )

        with Image.open(output) as image:
            assert image.size == expected

    def test_letterbox_canvas(self, make_image: MakeImage, tmp_path: Path) -> None:
        source = make_image("panel.png", (1000, 500), (10, 200, 10))
        output = tmp_path / "boxed.jpg"

        scale_up_and_fill(
            LetterboxRequest(
                source_path=source,
                output_path=output,
                width=1920,
                height=1080,
                fill="white",
            )
        )

        with Image.open(output) as image:
            # PNG bytes regardless of the extension
            assert image.format == "PNG"
            assert image.size == (1920, 1080)
            assert image.getpixel((0, 0)) == (255, 255, 255)
            assert image.getpixel((459, 289)) == (255, 255, 255)
            assert image.getpixel((460, 290)) == (10, 200, 10)
            assert image.getpixel((1459, 789)) == (10, 200, 10)
            assert image.getpixel((1460, 790)) == (255, 255, 255)


class TestConvertPipeline:
    """Converting real images between formats."""

    def test_round_trip_preserves_size(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("a.png", (321, 123))
        as_webp = convert_image(
            ConvertRequest(source_path=source, output_path=tmp_path / "a.webp")
        )
        back = convert_image(
            ConvertRequest(source_path=as_webp, output_path=tmp_path / "b.png")
        )

        with Image.open(as_webp) as image:
            assert image.format == "WEBP"
        with Image.open(back) as image:
            assert image.format == "PNG"
            assert image.size == (321, 123)


class TestSourceModes:
    """Sources whose mode or size the output format cannot take as-is."""

    def test_cmyk_jpeg_converts_to_png(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("print.jpg", (40, 30), (0, 0, 0, 0), mode="CMYK")

        written = convert_image(
            ConvertRequest(source_path=source, output_path=tmp_path / "print.png")
        )

        with Image.open(written) as image:
            assert image.format == "PNG"
            assert image.mode == "RGB"
            assert image.size == (40, 30)

    def test_cmyk_source_slices_to_png(
        self, make_image: MakeImage, tmp_path: Path
    ) -> None:
        source = make_image("tall.jpg", (400, 900), (0, 0, 0, 0), mode="CMYK")

        result = slice_image(
            SliceRequest(
                source_path=source,
                output_dir=tmp_path / "segments",
                max_height=300,
                min_height=250,
                aspect_ratio=2.0,
            )
        )

        assert result.ok, result.error
        assert len(result.output_files) == 3

    def test_oversized_source_reported_by_slicer(
        self,
        make_image: MakeImage,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", Image.MAX_IMAGE_PIXELS)
        source = make_image("strip.png", (100, 1000))

        result = slice_image(
            SliceRequest(
                source_path=source,
                output_dir=tmp_path / "segments",
                max_height=300,
                min_height=100,
                aspect_ratio=1.0,
            ),
            backend=PillowBackend(max_image_pixels=10_000),
        )

        assert isinstance(result.error, DecodeError)
        assert result.crop_height is None
        assert result.output_files == ()
