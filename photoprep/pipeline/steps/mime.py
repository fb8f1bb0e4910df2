"""MIME detection from file content, with alias folding."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from photoprep.config import DEFAULT_MIME

logger = logging.getLogger(__name__)

# Enough for every signature below, including a few ftyp compatible brands.
SNIFF_BYTES = 64

MIME_ALIASES: dict[str, str] = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "image/jfif": "image/jpeg",
    "image/x-png": "image/png",
    "image/x-ms-bmp": "image/bmp",
    "image/x-bmp": "image/bmp",
    "image/x-tiff": "image/tiff",
}

_HEIC_BRANDS = {b"heic", b"heix", b"heim", b"heis", b"hevc", b"hevx"}
_HEIF_BRANDS = {b"mif1", b"msf1", b"heif"}
_AVIF_BRANDS = {b"avif", b"avis"}


def normalize_mime(mime: str) -> str:
    """Fold vendor aliases onto one canonical MIME string. Idempotent."""
    cleaned = (mime or "").split(";", 1)[0].strip().lower()
    return MIME_ALIASES.get(cleaned, cleaned)


def _sniff_ftyp(data: bytes) -> Optional[str]:
    """Classify an ISO-BMFF container by its major and compatible brands."""
    if data[4:8] != b"ftyp":
        return None
    box_size = int.from_bytes(data[:4], "big")
    end = min(box_size, len(data)) if box_size >= 16 else len(data)
    major = data[8:12]
    # Compatible brands follow the 4-byte minor version.
    brands = {major} | {data[i:i + 4] for i in range(16, end - 3, 4)}

    if major in _AVIF_BRANDS or (major in _HEIF_BRANDS and brands & _AVIF_BRANDS):
        return "image/avif"
    if major in _HEIC_BRANDS:
        return "image/heic"
    if major in _HEIF_BRANDS:
        return "image/heic" if brands & _HEIC_BRANDS else "image/heif"
    if brands & _AVIF_BRANDS:
        return "image/avif"
    if brands & _HEIC_BRANDS:
        return "image/heic"
    return None


def sniff_mime(data: bytes) -> Optional[str]:
    """Detect image MIME type from leading file bytes (magic number)."""
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] in (b"II*\x00", b"MM\x00*"):
        return "image/tiff"
    if data[:2] == b"BM" and len(data) >= 14:
        return "image/bmp"
    return _sniff_ftyp(data)


def resolve_mime(path: Path | str, fallback: str = DEFAULT_MIME) -> str:
    """Return the canonical MIME type of the file at *path*.

    Never raises: unreadable files and unknown signatures yield *fallback*.
    """
    try:
        with open(path, "rb") as fh:
            head = fh.read(SNIFF_BYTES)
    except OSError as exc:
        logger.warning("Cannot read %s for MIME detection: %s", path, exc)
        return normalize_mime(fallback)

    detected = sniff_mime(head)
    return normalize_mime(detected or fallback)
