"""EXIF auto-orientation and metadata stripping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112
VALID_ORIENTATIONS = range(1, 9)

# Keys Pillow exposes in ``Image.info`` for embedded metadata blocks.
METADATA_KEYS = (
    "exif",
    "icc_profile",
    "xmp",
    "XML:com.adobe.xmp",
    "photoshop",
    "comment",
)


@dataclass
class OrientationOutcome:
    """Result of a best-effort orientation pass.

    ``image`` is always usable: on failure it is the untouched input.
    """

    image: Image.Image
    applied: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def strip_metadata(image: Image.Image) -> Image.Image:
    """Drop EXIF/ICC/XMP blocks so the encoder writes none of them."""
    for key in METADATA_KEYS:
        image.info.pop(key, None)
    return image


def normalize_orientation(image: Image.Image) -> OrientationOutcome:
    """Bake the EXIF orientation into the pixels, then strip metadata."""
    try:
        orientation = image.getexif().get(ORIENTATION_TAG, 1)
        upright = ImageOps.exif_transpose(image) if orientation != 1 else image
    except Exception as e:  # corrupt or unsupported EXIF
        return OrientationOutcome(image=strip_metadata(image), error=str(e))

    return OrientationOutcome(
        image=strip_metadata(upright),
        applied=orientation in VALID_ORIENTATIONS and orientation != 1,
    )
