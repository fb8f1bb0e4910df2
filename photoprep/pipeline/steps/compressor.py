"""Format-specific encoder settings."""

from __future__ import annotations

from typing import Any

from PIL import Image

JPEG_MIME = "image/jpeg"

# Modes the JPEG encoder accepts as-is.
_JPEG_MODES = {"1", "L", "RGB", "RGBX", "CMYK", "YCbCr"}


def compression_options(target_mime: str, quality: int) -> dict[str, Any]:
    """Encoder keyword arguments for *target_mime*.

    Only JPEG gets a lossy quality factor; other formats keep their
    encoder's defaults.
    """
    if target_mime != JPEG_MIME:
        return {}
    return {"quality": quality}


def prepare_for_jpeg(image: Image.Image) -> Image.Image:
    """Convert *image* to a mode JPEG can store, flattening alpha onto white."""
    if image.mode in _JPEG_MODES:
        return image

    if image.mode in ("P", "RGBA", "LA", "PA"):
        background = Image.new("RGB", image.size, (255, 255, 255))
        with image.convert("RGBA") as rgba:
            background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")
