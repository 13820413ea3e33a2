"""Video assembly for visualprep.

Key Components:
    - Clip / VideoRequest: ordered stills with display durations
    - build_encoder_args: pure ffmpeg argument construction
    - VideoEncoder: protocol for dependency injection
    - FFmpegEncoder: synchronous ffmpeg runner with optional timeout
    - compose_video: entry point
"""

from visualprep.video.composer import (
    Clip,
    FFmpegEncoder,
    VideoEncoder,
    VideoRequest,
    build_encoder_args,
    compose_video,
)

__all__ = [
    "Clip",
    "FFmpegEncoder",
    "VideoEncoder",
    "VideoRequest",
    "build_encoder_args",
    "compose_video",
]
