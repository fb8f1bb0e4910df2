"""Image-processing capability: full (Pillow) or pass-through.

The variant is chosen once at process start by :func:`select_capability`
and injected into the orchestrator, which branches on ``available``
exactly once per run.
"""

from __future__ import annotations

import importlib.util
import logging
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from photoprep import config
from photoprep.pipeline.models import PixelGeometry

if TYPE_CHECKING:
    from photoprep.pipeline.steps.orientation import OrientationOutcome

logger = logging.getLogger(__name__)

CAPABILITY_MODES = ("auto", "pillow", "none")


class ImageCapability(ABC):
    """Decode/transform/encode primitives used by the orchestrator.

    ``open`` yields an opaque handle that the other methods operate on.
    """

    name: str = "abstract"
    available: bool = False

    @abstractmethod
    def open(self, path: Path) -> AbstractContextManager[Any]: ...

    @abstractmethod
    def geometry(self, handle: Any) -> PixelGeometry: ...

    @abstractmethod
    def orient(self, handle: Any) -> OrientationOutcome: ...

    @abstractmethod
    def resize(self, handle: Any, max_dimension: int) -> bool: ...

    @abstractmethod
    def compress(self, handle: Any, target_mime: str, quality: int) -> dict[str, Any]: ...

    @abstractmethod
    def write(
        self,
        handle: Any,
        destination: Path,
        target_mime: str,
        options: dict[str, Any],
    ) -> None: ...


class PassThroughCapability(ImageCapability):
    """No image library: files are returned exactly as uploaded.

    Only ``available`` is meant to be read; every primitive raises.
    """

    name = "none"
    available = False

    def _unavailable(self) -> NotImplementedError:
        return NotImplementedError(f"{self.name} capability cannot process images")

    def open(self, path: Path) -> AbstractContextManager[Any]:
        raise self._unavailable()

    def geometry(self, handle: Any) -> PixelGeometry:
        raise self._unavailable()

    def orient(self, handle: Any) -> OrientationOutcome:
        raise self._unavailable()

    def resize(self, handle: Any, max_dimension: int) -> bool:
        raise self._unavailable()

    def compress(self, handle: Any, target_mime: str, quality: int) -> dict[str, Any]:
        raise self._unavailable()

    def write(
        self,
        handle: Any,
        destination: Path,
        target_mime: str,
        options: dict[str, Any],
    ) -> None:
        raise self._unavailable()


def select_capability(mode: Optional[str] = None) -> ImageCapability:
    """Pick the capability variant for this process.

    ``auto`` uses Pillow when it can be imported, ``pillow`` insists on it,
    ``none`` forces pass-through.
    """
    mode = (mode or config.IMAGE_CAPABILITY).strip().lower()
    if mode not in CAPABILITY_MODES:
        raise ValueError(
            f"Unknown image capability {mode!r}; expected one of {', '.join(CAPABILITY_MODES)}"
        )

    if mode == "none":
        logger.info("Image processing disabled by configuration")
        return PassThroughCapability()

    if importlib.util.find_spec("PIL") is None:
        if mode == "pillow":
            raise RuntimeError("PHOTOPREP_IMAGE_CAPABILITY=pillow but Pillow is not installed")
        logger.warning("Pillow not installed; uploads are stored unprocessed")
        return PassThroughCapability()

    from photoprep.pipeline.imaging import PillowCapability

    return PillowCapability()
