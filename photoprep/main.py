"""Entry point: normalize one image file from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from photoprep import config
from photoprep.pipeline.capability import PassThroughCapability, select_capability
from photoprep.pipeline.errors import ImageProcessingError
from photoprep.pipeline.models import ProcessingPolicy, RawUpload
from photoprep.pipeline.orchestrator import process_image
from photoprep.storage.uploads import stage_upload

logger = logging.getLogger("photoprep")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photoprep",
        description="Normalize an image: detect format, auto-orient, downscale, compress.",
    )
    parser.add_argument("image", type=Path, help="Path to the input image.")
    parser.add_argument(
        "--name",
        default=None,
        help="Original filename as supplied by the uploader (default: the input's name).",
    )
    parser.add_argument(
        "--upload-dir",
        type=Path,
        default=config.UPLOAD_DIR,
        help=f"Where a copy of the input is staged (default: {config.UPLOAD_DIR}).",
    )
    parser.add_argument(
        "--in-place",
        action="store_true",
        help="Process the input file itself instead of a staged copy.",
    )
    parser.add_argument(
        "--max-dimension",
        type=int,
        default=config.MAX_DIMENSION,
        help=f"Longest allowed edge in pixels (default: {config.MAX_DIMENSION}).",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=config.JPEG_QUALITY,
        help=f"JPEG quality 1-100 (default: {config.JPEG_QUALITY}).",
    )
    parser.add_argument(
        "--pass-through",
        action="store_true",
        help="Skip all image processing and keep the file as-is.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.image.is_file():
        logger.error("Image not found: %s", args.image)
        return 2

    try:
        policy = ProcessingPolicy(max_dimension=args.max_dimension, jpeg_quality=args.quality)
    except ValidationError as e:
        parser.error(f"invalid processing policy: {e.errors()[0]['msg']}")
    capability = PassThroughCapability() if args.pass_through else select_capability()
    original_name = args.name or args.image.name

    if args.in_place:
        upload = RawUpload(source_path=args.image, original_filename=original_name)
    else:
        upload = stage_upload(args.image, args.upload_dir, original_name, copy=True)

    try:
        result = process_image(upload, policy=policy, capability=capability)
    except ImageProcessingError as e:
        logger.error("%s: %s", e.kind.value, e)
        return 1

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
