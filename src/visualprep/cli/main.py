"""visualprep CLI - batch image slicing, scaling and video assembly.

Command-line front end that maps flags onto the request records in
``visualprep.ops`` and ``visualprep.video``.
"""

from __future__ import annotations

import json
import sys
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, NoReturn

import typer

from visualprep import __version__
from visualprep.config import settings
from visualprep.imaging.types import ImageFormat, ResampleFilter
from visualprep.utils.logging import bind_run_id, configure_logging, get_logger

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

app = typer.Typer(
    name="visualprep",
    help="visualprep: prepare images for bounded-size display pipelines",
    add_completion=False,
)

SourceArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Source image",
    ),
]
OutputArg = Annotated[Path, typer.Argument(help="Output image path")]
VerboseOpt = Annotated[
    int, typer.Option("--verbose", "-v", count=True, help="Increase verbosity")
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON")]
ResampleOpt = Annotated[
    ResampleFilter, typer.Option("--filter", "-f", help="Resample filter")
]


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: JsonOpt = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"visualprep {__version__}")


@app.command(name="slice")
def slice_command(  # noqa: PLR0913
    source: SourceArg,
    output_dir: Annotated[
        Path, typer.Argument(help="Directory receiving <y>.<format> segments")
    ],
    max_height: Annotated[
        int, typer.Option("--max-height", help="Height cap for aspect-derived bands")
    ],
    min_height: Annotated[
        int, typer.Option("--min-height", help="Band height used below the cap")
    ],
    aspect_ratio: Annotated[
        float, typer.Option("--aspect-ratio", "-a", help="Segment width/height ratio")
    ],
    output_format: Annotated[
        ImageFormat, typer.Option("--format", help="Segment image format")
    ] = ImageFormat(settings.SLICE_OUTPUT_FORMAT),
    keep_partial: Annotated[
        bool,
        typer.Option(
            "--keep-partial/--discard-partial",
            help="Keep segments already written when a later one fails",
        ),
    ] = True,
    verbose: VerboseOpt = 0,
    json_output: JsonOpt = False,
) -> None:
    """Slice a tall image into equal-height segments."""
    from visualprep.ops import SliceRequest, slice_image  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        request = SliceRequest(
            source_path=source,
            output_dir=output_dir,
            max_height=max_height,
            min_height=min_height,
            aspect_ratio=aspect_ratio,
            output_format=output_format,
        )
        result = slice_image(request)
        if not result.ok and not keep_partial:
            removed = result.discard()
            logger.warning("Partial output discarded", removed=len(removed))
        result.raise_for_error()
    except Exception as e:
        _fail(logger, "Slice failed", e, json_output)

    files = [str(path) for path in result.output_files]
    if json_output:
        typer.echo(
            json.dumps(
                {"crop_height": result.crop_height, "output_files": files}, indent=2
            )
        )
    else:
        typer.echo(f"Crop height: {result.crop_height}")
        typer.echo(f"Segments: {len(files)}")
        for path in files:
            typer.echo(f"  {path}")


@app.command(name="scale-down")
def scale_down(
    source: SourceArg,
    output: OutputArg,
    width: Annotated[int, typer.Option("--width", "-w", help="Target width")],
    resample: ResampleOpt = ResampleFilter(settings.DEFAULT_RESAMPLE),
    verbose: VerboseOpt = 0,
    json_output: JsonOpt = False,
) -> None:
    """Shrink an image to a target width (no-op if already narrower)."""
    from visualprep.ops import WidthScaleRequest, scale_down_by_width  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        written = scale_down_by_width(
            WidthScaleRequest(
                source_path=source,
                output_path=output,
                width=width,
                resample=resample,
            )
        )
    except Exception as e:
        _fail(logger, "Scale failed", e, json_output)

    _report(written, json_output, skipped_message="Source already within width")


@app.command()
def fit(  # noqa: PLR0913
    source: SourceArg,
    output: OutputArg,
    max_width: Annotated[int, typer.Option("--max-width", help="Box width")],
    max_height: Annotated[int, typer.Option("--max-height", help="Box height")],
    resample: ResampleOpt = ResampleFilter(settings.DEFAULT_RESAMPLE),
    verbose: VerboseOpt = 0,
    json_output: JsonOpt = False,
) -> None:
    """Resize an image to fit inside a box, preserving aspect ratio."""
    from visualprep.ops import ContainScaleRequest, scale_by_resolution  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        written = scale_by_resolution(
            ContainScaleRequest(
                source_path=source,
                output_path=output,
                max_width=max_width,
                max_height=max_height,
                resample=resample,
            )
        )
    except Exception as e:
        _fail(logger, "Fit failed", e, json_output)

    _report(written, json_output)


@app.command()
def letterbox(  # noqa: PLR0913
    source: SourceArg,
    output: OutputArg,
    width: Annotated[int, typer.Option("--width", "-w", help="Canvas width")],
    height: Annotated[int, typer.Option("--height", help="Canvas height")],
    fill: Annotated[
        str, typer.Option("--fill", help="Canvas color (name, #hex or rgb())")
    ] = settings.LETTERBOX_FILL,
    verbose: VerboseOpt = 0,
    json_output: JsonOpt = False,
) -> None:
    """Center an unscaled image on a solid-color canvas (PNG output)."""
    from visualprep.ops import LetterboxRequest, scale_up_and_fill  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        written = scale_up_and_fill(
            LetterboxRequest(
                source_path=source,
                output_path=output,
                width=width,
                height=height,
                fill=fill,
            )
        )
    except Exception as e:
        _fail(logger, "Letterbox failed", e, json_output)

    _report(written, json_output)


@app.command()
def convert(
    source: SourceArg,
    output: OutputArg,
    verbose: VerboseOpt = 0,
    json_output: JsonOpt = False,
) -> None:
    """Convert an image to the format named by the output extension."""
    from visualprep.ops import ConvertRequest, convert_image  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        written = convert_image(ConvertRequest(source_path=source, output_path=output))
    except Exception as e:
        _fail(logger, "Conversion failed", e, json_output)

    _report(written, json_output)


@app.command()
def compose(
    clips: Annotated[
        list[str],
        typer.Argument(help="Stills as IMAGE:SECONDS, in playback order"),
    ],
    output: Annotated[Path, typer.Option("--output", "-o", help="Output video")],
    timeout: Annotated[
        float,
        typer.Option("--timeout", help="Kill ffmpeg after N seconds (0 disables)"),
    ] = settings.ENCODER_TIMEOUT_SECONDS,
    verbose: VerboseOpt = 0,
    json_output: JsonOpt = False,
) -> None:
    """Compose still images into a video with ffmpeg."""
    from visualprep.video import (  # noqa: PLC0415
        Clip,
        FFmpegEncoder,
        VideoRequest,
        compose_video,
    )

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        parsed = tuple(
            Clip(path=path, duration=seconds)
            for path, seconds in map(_parse_clip, clips)
        )
        binary = settings.require_ffmpeg()
        request = VideoRequest(
            clips=parsed,
            output_path=output,
            output=None if json_output else sys.stderr,
        )
        written = compose_video(
            request, encoder=FFmpegEncoder(binary=binary, timeout=timeout)
        )
    except Exception as e:
        _fail(logger, "Composition failed", e, json_output)

    _report(written, json_output)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """visualprep: prepare images for bounded-size display pipelines."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level and tag the run."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)
    bind_run_id(uuid.uuid4().hex[:12])


def _parse_clip(spec: str) -> tuple[Path, float]:
    """Split ``IMAGE:SECONDS`` on its last colon."""
    path, sep, seconds = spec.rpartition(":")
    if not sep or not path:
        raise typer.BadParameter(f"Expected IMAGE:SECONDS, got {spec!r}")
    try:
        return Path(path), float(seconds)
    except ValueError:
        raise typer.BadParameter(f"Invalid duration in {spec!r}") from None


def _fail(
    logger: BoundLogger,
    message: str,
    error: Exception,
    json_output: bool,
) -> NoReturn:
    logger.exception(message)
    if json_output:
        typer.echo(json.dumps({"error": str(error)}))
    else:
        typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1) from None


def _report(
    written: Path | None,
    json_output: bool,
    skipped_message: str = "Nothing written",
) -> None:
    if json_output:
        typer.echo(
            json.dumps({"output": str(written) if written else None}, indent=2)
        )
    elif written is None:
        typer.echo(skipped_message)
    else:
        typer.echo(f"Wrote {written}")


if __name__ == "__main__":  # pragma: no cover
    app()
