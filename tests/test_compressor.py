"""Tests for encoder settings and JPEG mode preparation."""

from __future__ import annotations

import pytest
from PIL import Image

from photoprep.pipeline.steps.compressor import compression_options, prepare_for_jpeg


def test_jpeg_gets_quality() -> None:
    assert compression_options("image/jpeg", 85) == {"quality": 85}
    assert compression_options("image/jpeg", 40) == {"quality": 40}


@pytest.mark.parametrize("mime", ["image/png", "image/webp", "image/gif"])
def test_other_formats_use_encoder_defaults(mime: str) -> None:
    assert compression_options(mime, 85) == {}


@pytest.mark.parametrize("mode", ["RGB", "L", "CMYK"])
def test_prepare_for_jpeg_keeps_compatible_modes(mode: str) -> None:
    image = Image.new(mode, (4, 4))

    assert prepare_for_jpeg(image) is image


def test_prepare_for_jpeg_flattens_alpha_on_white() -> None:
    image = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    image.putpixel((0, 0), (255, 0, 0, 255))

    flat = prepare_for_jpeg(image)

    assert flat.mode == "RGB"
    assert flat.getpixel((0, 0)) == (255, 0, 0)
    assert flat.getpixel((3, 3)) == (255, 255, 255)


def test_prepare_for_jpeg_converts_palette() -> None:
    image = Image.new("P", (4, 4))

    assert prepare_for_jpeg(image).mode == "RGB"
