"""Conversion policy: keep the input encoding or transcode to JPEG."""

from __future__ import annotations

from collections.abc import Collection

from photoprep.config import CONVERTIBLE_MIME_TYPES
from photoprep.pipeline.models import ConversionDecision
from photoprep.pipeline.steps.mime import normalize_mime

JPEG_MIME = "image/jpeg"


def decide(
    mime: str,
    convertible: Collection[str] = CONVERTIBLE_MIME_TYPES,
) -> ConversionDecision:
    """Advise conversion vs pass-through. Unknown types are not rejected here."""
    canonical = normalize_mime(mime)
    if canonical in convertible:
        return ConversionDecision(
            source_mime=canonical, convertible=True, target_mime=JPEG_MIME,
        )
    return ConversionDecision(
        source_mime=canonical, convertible=False, target_mime=canonical,
    )
