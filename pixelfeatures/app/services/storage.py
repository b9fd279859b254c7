"""
Local storage service for uploaded score archives.

Uploaded ``.npz`` archives are streamed to a temporary file while their
SHA-256 hash is computed, validated, and moved to
``storage/scores/{hash}.npz``.  Identical uploads reuse the same file.
The score bank loads archives back through :func:`load_scores_for_image`.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile

from ..api.models import ImageInfo
from ..config import get_settings
from .images_store import ImageRecord, get_image_record, get_record_by_hash, insert_image_record
from .score_bank import ChannelScores
from .score_cache import load_score_archive
from .scores import IntScoreMatrix

logger = logging.getLogger(__name__)

STORAGE_SCORES_DIR = get_settings().storage_dir / "scores"
STORAGE_SCORES_DIR.mkdir(parents=True, exist_ok=True)

STORAGE_TEMP_DIR = get_settings().storage_dir / "tmp"
STORAGE_TEMP_DIR.mkdir(parents=True, exist_ok=True)


def save_score_upload(upload_file: UploadFile) -> ImageInfo:
    """Persist an uploaded score archive and return its metadata.

    Raises:
        HTTPException: 400 if the upload is not a valid score archive.
    """
    logger.info("Saving uploaded score archive %s", getattr(upload_file, "filename", "<unknown>"))
    image_id = uuid.uuid4().hex
    sha256 = hashlib.sha256()
    temp_path = STORAGE_TEMP_DIR / f"tmp_{image_id}.npz"
    with temp_path.open("wb") as tmp_file:
        while True:
            chunk = upload_file.file.read(8192)
            if not chunk:
                break
            tmp_file.write(chunk)
            sha256.update(chunk)
    file_hash = sha256.hexdigest()
    try:
        try:
            channels = load_score_archive(temp_path)
        except ValueError as exc:
            logger.warning("Rejected score archive %s: %s", upload_file.filename, exc)
            raise HTTPException(status_code=400, detail=f"Invalid score archive: {exc}")

        existing = get_record_by_hash(file_hash)
        if existing is not None and Path(existing.file_path).exists():
            canonical_path = Path(existing.file_path)
        else:
            canonical_path = STORAGE_SCORES_DIR / f"{file_hash}.npz"
            temp_path.replace(canonical_path)
    finally:
        # Gone already when moved into place; otherwise always discarded.
        temp_path.unlink(missing_ok=True)

    height, width = next(iter(channels.values())).shape
    record = ImageRecord(
        image_id=image_id,
        original_name=upload_file.filename or "",
        file_hash=file_hash,
        file_path=str(canonical_path),
        channels=",".join(channels),
        width=int(width),
        height=int(height),
    )
    # Committing expires the record's attributes, so build the response first.
    info = ImageInfo(
        imageId=image_id,
        filename=record.original_name,
        channels=record.channel_list,
        width=record.width,
        height=record.height,
        createdAt=record.created_at,
    )
    insert_image_record(record)
    return info


def load_scores_for_image(image_id: str) -> ChannelScores:
    """Load the channel score matrices of a stored image.

    Raises:
        HTTPException: 404 if no image with ``image_id`` exists.
        FileNotFoundError: If its archive is missing from disk.
    """
    record = get_image_record(image_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Image not found")
    policy = get_settings().out_of_bounds
    channels = load_score_archive(Path(record.file_path))
    return {name: IntScoreMatrix(values, out_of_bounds=policy) for name, values in channels.items()}
