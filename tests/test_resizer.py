"""Tests for the dimension ceiling."""

from __future__ import annotations

import pytest
from PIL import Image

from photoprep.pipeline.models import PixelGeometry
from photoprep.pipeline.steps.resizer import fit_within, resize_to_fit


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        ((6000, 4000), (3000, 2000)),
        ((4000, 6000), (2000, 3000)),
        ((5000, 5000), (3000, 3000)),
        ((3001, 1), (3000, 1)),
        ((1, 9000), (1, 3000)),
        ((4032, 3024), (3000, 2250)),
        ((3000, 3000), (3000, 3000)),
        ((1200, 800), (1200, 800)),
    ],
)
def test_fit_within(size: tuple[int, int], expected: tuple[int, int]) -> None:
    result = fit_within(PixelGeometry(width=size[0], height=size[1]), 3000)

    assert (result.width, result.height) == expected


@pytest.mark.parametrize(
    "size", [(6001, 4003), (3333, 7777), (10000, 17), (3017, 3016), (12, 5000)],
)
def test_fit_within_preserves_aspect_and_never_upscales(size: tuple[int, int]) -> None:
    width, height = size
    result = fit_within(PixelGeometry(width=width, height=height), 3000)

    assert result.long_edge == 3000
    assert result.width <= width and result.height <= height
    if width >= height:
        assert abs(result.height - height * 3000 / width) <= 1
    else:
        assert abs(result.width - width * 3000 / height) <= 1


def test_fit_within_returns_same_geometry_under_limit() -> None:
    geometry = PixelGeometry(width=10, height=20)

    assert fit_within(geometry, 20) is geometry


def test_resize_to_fit_downscales_image() -> None:
    image = Image.new("RGB", (400, 100), "white")

    resized = resize_to_fit(image, 100)

    assert resized.size == (100, 25)


def test_resize_to_fit_is_identity_under_limit() -> None:
    image = Image.new("RGB", (80, 100), "white")

    assert resize_to_fit(image, 100) is image


def test_resize_to_fit_palette_image_uses_rgba() -> None:
    image = Image.new("P", (300, 150), 3)

    resized = resize_to_fit(image, 100)

    assert resized.size == (100, 50)
    assert resized.mode == "RGBA"
