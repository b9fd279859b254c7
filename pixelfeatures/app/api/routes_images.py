"""
Routes for score archive upload and image management.

Score archives are ``.npz`` files holding one 2-D integer matrix per
channel.  Uploading one registers a new image whose features can then
be computed through the feature routes.
"""

from __future__ import annotations

from fastapi import APIRouter, File, HTTPException, UploadFile

from .models import ImageInfo
from ..services.images_store import (
    ImageRecord,
    delete_image as delete_image_record,
    get_image_record,
    list_images as list_image_records,
)
from ..services.runtime import get_score_bank
from ..services.storage import save_score_upload

router = APIRouter()


def _to_info(record: ImageRecord) -> ImageInfo:
    return ImageInfo(
        imageId=record.image_id,
        filename=record.original_name,
        channels=record.channel_list,
        width=record.width,
        height=record.height,
        createdAt=record.created_at,
    )


@router.post("/images", response_model=ImageInfo, status_code=201)
async def upload_image(file: UploadFile = File(...)) -> ImageInfo:
    """Upload a score archive for one image."""
    return save_score_upload(file)


@router.get("/images", response_model=list[ImageInfo])
async def list_images() -> list[ImageInfo]:
    return [_to_info(r) for r in list_image_records()]


@router.get("/images/{image_id}", response_model=ImageInfo)
async def get_image(image_id: str) -> ImageInfo:
    record = get_image_record(image_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return _to_info(record)


@router.delete("/images/{image_id}", status_code=204)
async def delete_image(image_id: str) -> None:
    """Delete an image and drop its scores from the in-memory bank."""
    if not delete_image_record(image_id):
        raise HTTPException(status_code=404, detail="Image not found")
    get_score_bank().evict(image_id)
    return None
