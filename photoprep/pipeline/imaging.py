"""Pillow-backed image capability."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import pillow_heif
from PIL import Image, UnidentifiedImageError

from photoprep.pipeline.capability import ImageCapability
from photoprep.pipeline.errors import UnreadableImageError, WriteFailedError
from photoprep.pipeline.models import PixelGeometry
from photoprep.pipeline.steps.compressor import (
    JPEG_MIME,
    compression_options,
    prepare_for_jpeg,
)
from photoprep.pipeline.steps.orientation import OrientationOutcome, normalize_orientation
from photoprep.pipeline.steps.resizer import resize_to_fit
from photoprep.pipeline.utils import partial_path, remove_quietly

# HEIC/HEIF decoding; AVIF is handled by Pillow's own plugin.
pillow_heif.register_heif_opener()

logger = logging.getLogger(__name__)

PIL_FORMATS: dict[str, str] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
}

_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)
_ENCODE_ERRORS = (OSError, ValueError, KeyError, TypeError)


@dataclass
class PillowHandle:
    """Working image plus the decoded original it was derived from.

    Intermediate images are closed as soon as a step replaces them; the
    decoded original is closed when the ``open`` context exits.
    """

    image: Image.Image
    source_format: Optional[str]
    decoded: Optional[Image.Image] = None

    def replace(self, image: Image.Image) -> bool:
        """Swap in *image*. Returns False when the step left the image as is."""
        if image is self.image:
            return False
        if self.image is not self.decoded:
            self.image.close()
        self.image = image
        return True


def pil_format_for(target_mime: str, source_format: Optional[str]) -> Optional[str]:
    """Pillow writer name for *target_mime*, else the format it was decoded as."""
    return PIL_FORMATS.get(target_mime, source_format)


class PillowCapability(ImageCapability):
    name = "pillow"
    available = True

    @contextmanager
    def open(self, path: Path) -> Iterator[PillowHandle]:
        image: Optional[Image.Image] = None
        try:
            image = Image.open(path)
            image.load()  # force-decode so format errors surface here
        except _DECODE_ERRORS as e:
            if image is not None:
                image.close()
            raise UnreadableImageError(path, e) from e

        handle = PillowHandle(image=image, source_format=image.format, decoded=image)
        try:
            yield handle
        finally:
            handle.image.close()
            image.close()

    def geometry(self, handle: PillowHandle) -> PixelGeometry:
        return PixelGeometry(width=handle.image.width, height=handle.image.height)

    def orient(self, handle: PillowHandle) -> OrientationOutcome:
        outcome = normalize_orientation(handle.image)
        handle.replace(outcome.image)
        return outcome

    def resize(self, handle: PillowHandle, max_dimension: int) -> bool:
        return handle.replace(resize_to_fit(handle.image, max_dimension))

    def compress(self, handle: PillowHandle, target_mime: str, quality: int) -> dict[str, Any]:
        return compression_options(target_mime, quality)

    def write(
        self,
        handle: PillowHandle,
        destination: Path,
        target_mime: str,
        options: dict[str, Any],
    ) -> None:
        """Encode into a sibling ``.part`` file, then rename it over *destination*."""
        pil_format = pil_format_for(target_mime, handle.source_format)
        scratch = partial_path(destination)
        try:
            if pil_format is None:
                raise ValueError(f"no encoder for {target_mime}")
            image = handle.image
            if target_mime == JPEG_MIME:
                image = prepare_for_jpeg(image)
            try:
                image.save(scratch, format=pil_format, **options)
            finally:
                if image is not handle.image:
                    image.close()
            os.replace(scratch, destination)
        except _ENCODE_ERRORS as e:
            remove_quietly(scratch)
            raise WriteFailedError(destination, e) from e

        logger.debug("Wrote %s as %s (%s)", destination, pil_format, options or "defaults")
