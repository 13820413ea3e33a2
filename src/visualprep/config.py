"""visualprep configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

import shutil

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid.

    Example:
        >>> Settings(FFMPEG_BINARY="no-such-ffmpeg").require_ffmpeg()  # doctest: +ELLIPSIS
        Traceback (most recent call last):
        ...
        ConfigError: ffmpeg binary not configured. ...
    """

    def __init__(self, key_name: str, env_var: str) -> None:
        """Initialize configuration error.

        Args:
            key_name: Human-readable name of the missing key.
            env_var: Environment variable name to set.
        """
        self.key_name = key_name
        self.env_var = env_var
        message = (
            f"{key_name} not configured. "
            f"Set it in .env file or {env_var} environment variable."
        )
        super().__init__(message)


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Video encoder
    FFMPEG_BINARY: str = "ffmpeg"
    ENCODER_SHELL: str = "bash"  # empty string runs ffmpeg without a shell
    VIDEO_CODEC: str = "libx264"
    PIXEL_FORMAT: str = "yuv420p"
    ENCODER_TIMEOUT_SECONDS: float = 0.0  # 0 = wait until the encoder exits

    # Image operations
    DEFAULT_RESAMPLE: str = "lanczos"
    SLICE_OUTPUT_FORMAT: str = "png"
    LETTERBOX_FILL: str = "black"
    MAX_IMAGE_PIXELS: int = 89_478_485  # Pillow's default; 0 disables the check

    def require_ffmpeg(self) -> str:
        """Resolve the ffmpeg executable, raising ConfigError if absent.

        Returns:
            Absolute path of the ffmpeg binary.

        Raises:
            ConfigError: If FFMPEG_BINARY cannot be found on PATH.
        """
        resolved = shutil.which(self.FFMPEG_BINARY)
        if resolved is None:
            raise ConfigError("ffmpeg binary", "FFMPEG_BINARY")
        return resolved


# Singleton instance for import convenience
settings = Settings()
