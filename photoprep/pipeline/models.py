"""Pydantic data models for the normalization pipeline."""

from __future__ import annotations

import uuid
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, FilePath

from photoprep import config


# ── Enums ──────────────────────────────────────────────────────────

class PipelineStage(str, Enum):
    STARTED = "started"
    DETECTED = "detected"
    DECIDED = "decided"
    ORIENTED = "oriented"
    RESIZED = "resized"
    COMPRESSED = "compressed"
    WRITTEN = "written"
    FINALIZED = "finalized"
    FAILED = "failed"


# ── Input ──────────────────────────────────────────────────────────

class RawUpload(BaseModel):
    """A source file handed to the pipeline by the request layer.

    ``original_filename`` is untrusted and advisory: it only ever feeds
    path construction, never MIME decisions.
    """

    job_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    source_path: FilePath
    original_filename: str = ""


# ── Policy ─────────────────────────────────────────────────────────

class ProcessingPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_dimension: int = Field(default=3000, ge=1)
    jpeg_quality: int = Field(default=85, ge=1, le=100)
    convertible_mime_types: frozenset[str] = config.CONVERTIBLE_MIME_TYPES

    @classmethod
    def from_config(cls) -> ProcessingPolicy:
        return cls(
            max_dimension=config.MAX_DIMENSION,
            jpeg_quality=config.JPEG_QUALITY,
        )


# ── Decisions & geometry ───────────────────────────────────────────

class ConversionDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_mime: str
    convertible: bool
    target_mime: str


class PixelGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=1)
    height: int = Field(ge=1)

    @property
    def long_edge(self) -> int:
        return max(self.width, self.height)


# ── Result ─────────────────────────────────────────────────────────

class ProcessingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_id: str
    final_path: Path
    final_mime: str
    final_size_bytes: int = Field(ge=0)
    source_mime: str
    original_filename: str = ""
    converted: bool = False
    resized: bool = False
    orientation_applied: bool = False
    fallback: bool = False
    geometry: Optional[PixelGeometry] = None
