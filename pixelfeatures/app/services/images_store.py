"""
Metadata for uploaded score archives.

An ``ImageRecord`` stores the identifier assigned to an uploaded image,
the content hash and location of its score archive, the channel names
it provides and the image dimensions.  Identical archives uploaded
twice share one file on disk but get distinct image identifiers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from sqlmodel import SQLModel, Field, select

from .db import create_db_and_tables, get_session


class ImageRecord(SQLModel, table=True):
    """Database model representing an uploaded image's score archive."""

    image_id: str = Field(primary_key=True)
    original_name: str
    file_hash: str = Field(index=True)
    file_path: str
    # Comma separated channel names in archive order
    channels: str
    width: int
    height: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def channel_list(self) -> List[str]:
        return [c for c in self.channels.split(",") if c]


def init_db() -> None:
    """Create the tables on application startup."""
    create_db_and_tables()


def insert_image_record(record: ImageRecord) -> None:
    with get_session() as session:
        session.add(record)
        session.commit()


def get_image_record(image_id: str) -> Optional[ImageRecord]:
    with get_session() as session:
        return session.get(ImageRecord, image_id)


def get_record_by_hash(file_hash: str) -> Optional[ImageRecord]:
    """Return any image whose archive has the given SHA-256 hash."""
    with get_session() as session:
        statement = select(ImageRecord).where(ImageRecord.file_hash == file_hash)
        return session.exec(statement).first()


def list_images() -> List[ImageRecord]:
    with get_session() as session:
        statement = select(ImageRecord).order_by(ImageRecord.created_at)
        return list(session.exec(statement))


def delete_image(image_id: str) -> bool:
    """Delete an image record.

    The archive file is left on disk when other images still reference
    the same content.

    Returns:
        ``True`` if a record was deleted.
    """
    with get_session() as session:
        record = session.get(ImageRecord, image_id)
        if record is None:
            return False
        file_hash = record.file_hash
        file_path = record.file_path
        session.delete(record)
        session.commit()
        remaining = session.exec(
            select(ImageRecord).where(ImageRecord.file_hash == file_hash)
        ).first()
    if remaining is None:
        Path(file_path).unlink(missing_ok=True)
    return True
