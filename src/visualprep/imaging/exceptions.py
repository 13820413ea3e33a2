"""Custom exceptions for image and video operations.

These exceptions wrap low-level Pillow, OS and subprocess errors with
the path (or command) that failed.
"""

from collections.abc import Sequence
from pathlib import Path


class MediaError(Exception):
    """Base exception for all visualprep media errors."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize media error with optional path context.

        Args:
            message: Human-readable error description.
            path: Path to the file that caused the error.
        """
        self.path = Path(path) if path else None
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with path context if available."""
        if self.path:
            return f"{self.message} (path: {self.path})"
        return self.message


class DecodeError(MediaError):
    """Raised when a source image cannot be opened or decoded.

    This error is raised when:
    - The file does not exist
    - The file is not a recognized image format
    - The file is truncated or corrupt
    """

    pass


class EncodeError(MediaError):
    """Raised when an image cannot be written.

    This error is raised when:
    - The output format is unknown or unsupported
    - The destination is not writable (permissions, missing volume)
    - The disk is full
    """

    pass


class SubprocessError(MediaError):
    """Raised when the external video encoder fails to launch or exits non-zero."""

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        *,
        returncode: int | None = None,
        command: Sequence[str] | None = None,
    ) -> None:
        """Initialize subprocess error with process context.

        Args:
            message: Human-readable error description.
            path: Output path the encoder was writing.
            returncode: Exit status of the process, if it ran.
            command: Argument list that was executed.
        """
        self.returncode = returncode
        self.command = tuple(command) if command is not None else None
        super().__init__(message, path)

    def _format_message(self) -> str:
        """Format error message with exit status and output path."""
        parts = [self.message]
        if self.path:
            parts.append(f"path={self.path}")
        if self.returncode is not None:
            parts.append(f"returncode={self.returncode}")

        if len(parts) == 1:
            return parts[0]
        return f"{parts[0]} ({', '.join(parts[1:])})"


class EncoderTimeoutError(SubprocessError):
    """Raised when the encoder is killed after exceeding its timeout."""

    pass
