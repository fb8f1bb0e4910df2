"""Shared fixtures: on-the-fly test images and an isolated event bus."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from photoprep.pipeline.events import Event, EventBus
from photoprep.pipeline.imaging import PillowCapability
from photoprep.pipeline.models import ProcessingPolicy

ORIENTATION_TAG = 0x0112

MakeImage = Callable[..., Path]


@pytest.fixture
def make_image(tmp_path: Path) -> MakeImage:
    """Write a solid-colour image and return its path.

    ``orientation`` adds an EXIF orientation tag (JPEG/WebP/PNG only).
    """

    def _make(
        name: str,
        size: tuple[int, int] = (64, 48),
        fmt: str = "PNG",
        mode: str = "RGB",
        orientation: int | None = None,
        **save_kwargs,
    ) -> Path:
        color = (200, 30, 30, 255)[: len(mode)] if mode in ("RGB", "RGBA") else 128
        image = Image.new(mode, size, color)
        if orientation is not None:
            exif = Image.Exif()
            exif[ORIENTATION_TAG] = orientation
            save_kwargs["exif"] = exif
        path = tmp_path / name
        image.save(path, format=fmt, **save_kwargs)
        return path

    return _make


@pytest.fixture
def capability() -> PillowCapability:
    return PillowCapability()


@pytest.fixture
def policy() -> ProcessingPolicy:
    return ProcessingPolicy()


@pytest.fixture
def recorded_bus() -> tuple[EventBus, list[Event]]:
    bus = EventBus()
    events: list[Event] = []
    bus.subscribe(events.append)
    return bus, events
