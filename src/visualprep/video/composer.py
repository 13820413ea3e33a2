"""Assemble still images into a video with ffmpeg.

Each clip becomes one looped still input held for its duration; a single
concat filter joins them in order:

    ffmpeg -loop 1 -t 3.00 -i a.png -loop 1 -t 5.00 -i b.png \
        -filter_complex concat=n=2:v=1:a=0[v] -map [v] \
        -c:v libx264 -pix_fmt yuv420p out.mp4 -y

Clip order is the order of ``VideoRequest.clips``, so the same request
always produces the same frame order. ``VideoRequest.from_durations``
accepts a path -> duration mapping and keeps its iteration order.
"""

from __future__ import annotations

import contextvars
import shlex
import subprocess
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TextIO

from pydantic import BaseModel, Field

from visualprep.config import settings
from visualprep.imaging.exceptions import EncoderTimeoutError, SubprocessError
from visualprep.utils.logging import get_logger

logger = get_logger(__name__)

# Upper bound on draining leftover output after a timed-out encoder is killed
_DRAIN_SECONDS = 5.0


class Clip(BaseModel, frozen=True):
    """One still image held on screen for ``duration`` seconds."""

    path: Path
    duration: float = Field(..., gt=0, description="Display time in seconds")


@dataclass(frozen=True)
class VideoRequest:
    """Input for composing a video.

    Attributes:
        clips: Stills in playback order. Must not be empty.
        output_path: Video file to write (overwritten if present).
        output: Sink receiving the encoder's merged stdout/stderr. When
            None, encoder output is logged at debug level.
    """

    clips: tuple[Clip, ...]
    output_path: Path
    output: TextIO | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.clips:
            raise ValueError("VideoRequest requires at least one clip")

    @classmethod
    def from_durations(
        cls,
        durations: Mapping[str | Path, float],
        output_path: Path,
        output: TextIO | None = None,
    ) -> VideoRequest:
        """Build a request from a path -> seconds mapping, in mapping order."""
        clips = tuple(
            Clip(path=Path(path), duration=duration)
            for path, duration in durations.items()
        )
        return cls(clips=clips, output_path=output_path, output=output)


def build_encoder_args(
    clips: Sequence[Clip],
    output_path: Path,
    *,
    binary: str | None = None,
    codec: str | None = None,
    pixel_format: str | None = None,
) -> list[str]:
    """Build the ffmpeg argument list for ``clips``.

    Args:
        clips: Stills in playback order.
        output_path: Destination video path.
        binary: ffmpeg executable. Defaults to settings.FFMPEG_BINARY.
        codec: Video codec. Defaults to settings.VIDEO_CODEC.
        pixel_format: Output pixel format. Defaults to settings.PIXEL_FORMAT.

    Returns:
        Argument vector, executable first.
    """
    args = [binary or settings.FFMPEG_BINARY]
    for clip in clips:
        args.extend(["-loop", "1", "-t", f"{clip.duration:.2f}", "-i", str(clip.path)])

    args.extend(
        [
            "-filter_complex",
            f"concat=n={len(clips)}:v=1:a=0[v]",
            "-map",
            "[v]",
            "-c:v",
            codec or settings.VIDEO_CODEC,
            "-pix_fmt",
            pixel_format or settings.PIXEL_FORMAT,
            str(output_path),
            "-y",
        ]
    )
    return args


class VideoEncoder(Protocol):
    """Protocol for anything that can turn clips into a video file."""

    def encode(
        self,
        clips: Sequence[Clip],
        output_path: Path,
        output: TextIO | None = None,
    ) -> None:
        """Encode ``clips`` to ``output_path``.

        Raises:
            SubprocessError: If encoding fails.
        """
        ...


class FFmpegEncoder:
    """Runs ffmpeg synchronously, optionally through a shell.

    When ``shell`` is set the argument list is quoted with ``shlex.join``
    and executed as ``<shell> -c <command>``. stdout and stderr are merged
    into a single stream.
    """

    __slots__ = ("_binary", "_codec", "_pixel_format", "_shell", "_timeout")

    def __init__(
        self,
        binary: str | None = None,
        codec: str | None = None,
        pixel_format: str | None = None,
        shell: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the encoder.

        Args:
            binary: ffmpeg executable. Defaults to settings.FFMPEG_BINARY.
            codec: Video codec. Defaults to settings.VIDEO_CODEC.
            pixel_format: Pixel format. Defaults to settings.PIXEL_FORMAT.
            shell: Shell used to run the command. Defaults to
                settings.ENCODER_SHELL; an empty string runs ffmpeg directly.
            timeout: Seconds to wait before killing ffmpeg. Defaults to
                settings.ENCODER_TIMEOUT_SECONDS; 0 or None waits forever.
        """
        self._binary = binary or settings.FFMPEG_BINARY
        self._codec = codec or settings.VIDEO_CODEC
        self._pixel_format = pixel_format or settings.PIXEL_FORMAT
        self._shell = settings.ENCODER_SHELL if shell is None else shell
        timeout = settings.ENCODER_TIMEOUT_SECONDS if timeout is None else timeout
        self._timeout = timeout if timeout > 0 else None

    def command(self, clips: Sequence[Clip], output_path: Path) -> list[str]:
        """Return the exact process argv that ``encode`` would execute."""
        args = build_encoder_args(
            clips,
            output_path,
            binary=self._binary,
            codec=self._codec,
            pixel_format=self._pixel_format,
        )
        if self._shell:
            return [self._shell, "-c", shlex.join(args)]
        return args

    def encode(
        self,
        clips: Sequence[Clip],
        output_path: Path,
        output: TextIO | None = None,
    ) -> None:
        """Run ffmpeg and block until it exits.

        Encoder output is forwarded line by line while ffmpeg runs, so a
        long encode shows its progress as it happens.

        Raises:
            SubprocessError: If ffmpeg cannot be launched or exits non-zero.
            EncoderTimeoutError: If ffmpeg outlives the configured timeout.
        """
        command = self.command(clips, output_path)
        logger.info(
            "Running video encoder",
            clips=len(clips),
            command=command[-1] if self._shell else shlex.join(command),
        )

        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise SubprocessError(
                f"Failed to launch encoder: {e}",
                path=output_path,
                command=command,
            ) from e

        with process:
            # Drain the pipe on a side thread so wait() can enforce the timeout
            pump = threading.Thread(
                target=contextvars.copy_context().run,
                args=(self._pump, process.stdout, output),
                daemon=True,
            )
            pump.start()
            try:
                process.wait(timeout=self._timeout)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
                pump.join(timeout=_DRAIN_SECONDS)
                raise EncoderTimeoutError(
                    f"Encoder exceeded {self._timeout}s timeout",
                    path=output_path,
                    returncode=process.returncode,
                    command=command,
                ) from None
            pump.join()

        if process.returncode != 0:
            raise SubprocessError(
                "Encoder exited with non-zero status",
                path=output_path,
                returncode=process.returncode,
                command=command,
            )

    @staticmethod
    def _pump(stream: TextIO | None, output: TextIO | None) -> None:
        if stream is None:
            return
        for line in iter(stream.readline, ""):
            if output is not None:
                output.write(line)
                output.flush()
            else:
                logger.debug("ffmpeg", line=line.rstrip())


def compose_video(
    request: VideoRequest,
    encoder: VideoEncoder | None = None,
) -> Path:
    """Compose ``request.clips`` into a single video at ``request.output_path``.

    Args:
        request: Clips, output path and output sink.
        encoder: Encoder to use; defaults to FFmpegEncoder from settings.

    Returns:
        The output path.

    Raises:
        SubprocessError: If the encoder fails. No retry is attempted.
    """
    encoder = encoder or FFmpegEncoder()
    total = sum(clip.duration for clip in request.clips)
    logger.info(
        "Composing video",
        clips=len(request.clips),
        total_seconds=round(total, 2),
        path=str(request.output_path),
    )
    encoder.encode(request.clips, request.output_path, request.output)
    logger.info("Video composed", path=str(request.output_path))
    return request.output_path
