"""Shared path helpers for the pipeline."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from photoprep.config import JPEG_EXTENSION

logger = logging.getLogger(__name__)

# Source extensions that are swapped (not appended to) when transcoding.
CONVERTIBLE_EXTENSIONS = re.compile(r"\.(heic|heif|avif|bmp|tif|tiff)$", re.IGNORECASE)

PARTIAL_SUFFIX = ".part"


def derive_output_path(path: Path | str, target_ext: str = JPEG_EXTENSION) -> Path:
    """Return the destination for a transcoded copy of *path*.

    A recognized convertible extension is replaced by *target_ext*
    (``photo.HEIC`` -> ``photo.jpg``). Any other name gets *target_ext*
    appended (``upload`` -> ``upload.jpg``, ``scan.jpeg`` -> ``scan.jpeg.jpg``),
    so the result never equals the input.
    """
    path = Path(path)
    if CONVERTIBLE_EXTENSIONS.search(path.name):
        return path.with_name(CONVERTIBLE_EXTENSIONS.sub(target_ext, path.name))
    return path.with_name(path.name + target_ext)


def partial_path(path: Path | str) -> Path:
    """Sibling scratch file that a write lands in before the final rename."""
    path = Path(path)
    return path.with_name(path.name + PARTIAL_SUFFIX)


def remove_quietly(path: Path | str) -> bool:
    """Delete *path* if present. Returns False (and logs) when deletion fails."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
    return True
