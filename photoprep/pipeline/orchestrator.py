"""Pipeline orchestrator: detect, decide, orient, resize, compress, write."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from photoprep.pipeline.capability import ImageCapability, select_capability
from photoprep.pipeline.errors import ImageProcessingError
from photoprep.pipeline.events import Event, EventBus, EventType, event_bus
from photoprep.pipeline.models import (
    PipelineStage,
    ProcessingPolicy,
    ProcessingResult,
    RawUpload,
)
from photoprep.pipeline.steps.mime import resolve_mime
from photoprep.pipeline.steps.policy import decide
from photoprep.pipeline.utils import derive_output_path, remove_quietly

logger = logging.getLogger(__name__)

_default_capability: Optional[ImageCapability] = None


def default_capability() -> ImageCapability:
    """Process-wide capability, selected on first use from configuration."""
    global _default_capability
    if _default_capability is None:
        _default_capability = select_capability()
    return _default_capability


def _stage(bus: EventBus, job_id: str, stage: PipelineStage, **data) -> PipelineStage:
    bus.emit(Event(
        type=EventType.STAGE_CHANGED,
        job_id=job_id,
        data={"stage": stage.value, **data},
    ))
    return stage


def process_image(
    upload: RawUpload,
    policy: Optional[ProcessingPolicy] = None,
    capability: Optional[ImageCapability] = None,
    bus: EventBus = event_bus,
) -> ProcessingResult:
    """Normalize one uploaded image and return where it ended up.

    Raises :class:`UnreadableImageError` or :class:`WriteFailedError`; on
    either, the source is untouched or the destination is complete.
    """
    policy = policy or ProcessingPolicy.from_config()
    capability = capability or default_capability()
    source = Path(upload.source_path)
    job_id = upload.job_id
    stage = PipelineStage.STARTED

    bus.emit(Event(
        type=EventType.JOB_STARTED,
        job_id=job_id,
        data={"source": str(source), "capability": capability.name},
    ))

    try:
        mime = resolve_mime(source)
        stage = _stage(bus, job_id, PipelineStage.DETECTED, mime=mime)

        decision = decide(mime, policy.convertible_mime_types)
        stage = _stage(bus, job_id, PipelineStage.DECIDED, convertible=decision.convertible)

        if not capability.available:
            logger.warning(
                "No image capability; storing %s unprocessed as %s", source.name, mime,
            )
            result = ProcessingResult(
                job_id=job_id,
                final_path=source,
                final_mime=mime,
                final_size_bytes=source.stat().st_size,
                source_mime=mime,
                original_filename=upload.original_filename,
                fallback=True,
            )
            stage = _stage(bus, job_id, PipelineStage.FINALIZED, fallback=True)
            _completed(bus, result)
            return result

        destination = derive_output_path(source) if decision.convertible else source

        with capability.open(source) as handle:
            if destination != source:
                # At most one file may occupy the final path.
                remove_quietly(destination)

            outcome = capability.orient(handle)
            if not outcome.ok:
                logger.warning(
                    "Orientation metadata unreadable for %s, assuming upright: %s",
                    source.name, outcome.error,
                )
            stage = _stage(bus, job_id, PipelineStage.ORIENTED, applied=outcome.applied)

            resized = capability.resize(handle, policy.max_dimension)
            geometry = capability.geometry(handle)
            stage = _stage(
                bus, job_id, PipelineStage.RESIZED,
                width=geometry.width, height=geometry.height, resized=resized,
            )

            options = capability.compress(handle, decision.target_mime, policy.jpeg_quality)
            if options:
                stage = _stage(bus, job_id, PipelineStage.COMPRESSED, **options)

            capability.write(handle, destination, decision.target_mime, options)
            stage = _stage(bus, job_id, PipelineStage.WRITTEN, path=str(destination))

        if destination != source and not remove_quietly(source):
            logger.warning("Source %s left behind after conversion", source)

        final_mime = resolve_mime(destination, fallback=decision.target_mime)
        result = ProcessingResult(
            job_id=job_id,
            final_path=destination,
            final_mime=final_mime,
            final_size_bytes=destination.stat().st_size,
            source_mime=mime,
            original_filename=upload.original_filename,
            converted=decision.convertible,
            resized=resized,
            orientation_applied=outcome.applied,
            geometry=geometry,
        )
        stage = _stage(bus, job_id, PipelineStage.FINALIZED, mime=final_mime)
        _completed(bus, result)
        return result

    except ImageProcessingError as e:
        bus.emit(Event(
            type=EventType.JOB_FAILED,
            job_id=job_id,
            data={"stage": stage.value, "kind": e.kind.value, "error": str(e)},
        ))
        logger.exception("Pipeline failed for job %s at stage %s", job_id, stage.value)
        raise


def _completed(bus: EventBus, result: ProcessingResult) -> None:
    bus.emit(Event(
        type=EventType.JOB_COMPLETED,
        job_id=result.job_id,
        data={
            "final_path": str(result.final_path),
            "final_mime": result.final_mime,
            "size": result.final_size_bytes,
        },
    ))
    logger.info(
        "Pipeline completed for job %s: %s (%s, %d bytes)",
        result.job_id, result.final_path, result.final_mime, result.final_size_bytes,
    )


async def process_image_async(
    upload: RawUpload,
    policy: Optional[ProcessingPolicy] = None,
    capability: Optional[ImageCapability] = None,
    bus: EventBus = event_bus,
) -> ProcessingResult:
    """Run :func:`process_image` in a worker thread."""
    return await asyncio.to_thread(process_image, upload, policy, capability, bus)
