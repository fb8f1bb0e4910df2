"""Aspect-preserving downscale above a dimension ceiling."""

from __future__ import annotations

from PIL import Image

from photoprep.pipeline.models import PixelGeometry


def fit_within(geometry: PixelGeometry, max_dimension: int) -> PixelGeometry:
    """Return the geometry after capping the long edge at *max_dimension*.

    Width is the constrained axis when ``width >= height``. Never upscales.
    """
    width, height = geometry.width, geometry.height
    if max(width, height) <= max_dimension:
        return geometry

    if width >= height:
        new_width = max_dimension
        new_height = max(1, round(height * max_dimension / width))
    else:
        new_height = max_dimension
        new_width = max(1, round(width * max_dimension / height))
    return PixelGeometry(width=new_width, height=new_height)


def resize_to_fit(image: Image.Image, max_dimension: int) -> Image.Image:
    """Downscale *image* with Lanczos resampling, or return it unchanged."""
    current = PixelGeometry(width=image.width, height=image.height)
    target = fit_within(current, max_dimension)
    if target == current:
        return image

    # Palette images would otherwise be forced to nearest-neighbour.
    if image.mode == "P":
        with image.convert("RGBA") as rgba:
            return rgba.resize((target.width, target.height), Image.Resampling.LANCZOS)
    return image.resize((target.width, target.height), Image.Resampling.LANCZOS)
