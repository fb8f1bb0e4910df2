"""Configuration: environment variables and processing defaults."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# ── Load .env ──────────────────────────────────────────────────────
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ── Logging ────────────────────────────────────────────────────────
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

# ── Paths ──────────────────────────────────────────────────────────
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
UPLOAD_DIR: Path = Path(
    os.environ.get("PHOTOPREP_UPLOAD_DIR", str(PROJECT_ROOT / "uploads"))
)

# ── Processing policy defaults ─────────────────────────────────────
MAX_DIMENSION: int = int(os.environ.get("PHOTOPREP_MAX_DIMENSION", "3000"))
JPEG_QUALITY: int = int(os.environ.get("PHOTOPREP_JPEG_QUALITY", "85"))

# auto | pillow | none
IMAGE_CAPABILITY: str = os.environ.get("PHOTOPREP_IMAGE_CAPABILITY", "auto").strip().lower()

# ── MIME handling ──────────────────────────────────────────────────
DEFAULT_MIME: str = "application/octet-stream"

# Always transcoded to JPEG, regardless of size. Not configurable.
CONVERTIBLE_MIME_TYPES: frozenset[str] = frozenset({
    "image/heic",
    "image/heif",
    "image/avif",
    "image/bmp",
    "image/tiff",
})

JPEG_EXTENSION: str = ".jpg"
