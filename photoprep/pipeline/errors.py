"""Typed failures raised by the normalization pipeline."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorKind(str, Enum):
    UNREADABLE_IMAGE = "unreadable_image"
    WRITE_FAILED = "write_failed"


class ImageProcessingError(Exception):
    """Base class for fatal pipeline failures.

    The caller maps ``kind`` to a transport-level status; ``path`` is the
    file the failing step was working on.
    """

    kind: ErrorKind

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class UnreadableImageError(ImageProcessingError):
    """The byte stream cannot be decoded as any recognized image container."""

    kind = ErrorKind.UNREADABLE_IMAGE

    def __init__(self, path: Path | str, reason: object = None) -> None:
        message = f"Cannot decode image: {path}"
        if reason is not None:
            message += f" ({reason})"
        super().__init__(path, message)


class WriteFailedError(ImageProcessingError):
    """The destination could not be written. Partial output is already gone."""

    kind = ErrorKind.WRITE_FAILED

    def __init__(self, path: Path | str, reason: object = None) -> None:
        message = f"Cannot write image: {path}"
        if reason is not None:
            message += f" ({reason})"
        super().__init__(path, message)
