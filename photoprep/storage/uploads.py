"""Staging of uploaded files under collision-free names."""

from __future__ import annotations

import logging
import re
import secrets
import shutil
from pathlib import Path

from photoprep.pipeline.models import RawUpload

logger = logging.getLogger(__name__)

_UNSAFE_EXT_CHARS = re.compile(r"[^a-z0-9]")


def upload_name(original_filename: str) -> str:
    """Random 24-hex-char name keeping the (sanitized) original extension."""
    ext = _UNSAFE_EXT_CHARS.sub("", Path(original_filename or "").suffix.lower())
    stem = secrets.token_hex(12)
    return f"{stem}.{ext}" if ext else stem


def stage_upload(
    temp_path: Path | str,
    upload_dir: Path | str,
    original_filename: str,
    copy: bool = False,
) -> RawUpload:
    """Move (or copy) a received file into *upload_dir* and describe it.

    The original filename only contributes its extension; the stored name
    is random, so concurrent uploads never share a path.
    """
    upload_dir = Path(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = upload_dir / upload_name(original_filename)

    if copy:
        shutil.copyfile(temp_path, dest)
    else:
        shutil.move(str(temp_path), dest)

    logger.debug("Staged %s as %s", original_filename or temp_path, dest.name)
    return RawUpload(source_path=dest, original_filename=original_filename)
