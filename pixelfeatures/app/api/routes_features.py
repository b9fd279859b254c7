"""
API routes for diameter score features.

The metadata endpoint lists feature names, types and colours in record
order.  The compute endpoint scores a batch of pixels of one uploaded
image and returns one record per pixel in that same order.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from .models import FeatureMetadataResponse, FeatureRequest, FeatureResponse
from ..services.lattice import Coordinate
from ..services.runtime import new_feature_set

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/features/metadata", response_model=FeatureMetadataResponse)
async def get_feature_metadata() -> FeatureMetadataResponse:
    return FeatureMetadataResponse(**new_feature_set().describe())


@router.post("/images/{image_id}/features", response_model=FeatureResponse)
async def compute_features(image_id: str, body: FeatureRequest) -> FeatureResponse:
    """Compute diameter score records for the requested pixels."""
    for center in body.centers:
        if len(center) != 2:
            raise HTTPException(status_code=422, detail=f"Center {center} must be an (x, y) pair")
    feature_set = new_feature_set()
    try:
        feature_set.initialize_data_for_image(image_id)
    except KeyError as exc:
        # KeyError wraps its message in quotes; unwrap for the response.
        raise HTTPException(status_code=422, detail=exc.args[0] if exc.args else str(exc))
    except FileNotFoundError as exc:
        logger.error("Score archive missing for image %s: %s", image_id, exc)
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        logger.exception("Stored score archive for image %s is unreadable: %s", image_id, exc)
        raise HTTPException(status_code=500, detail=f"Failed to load scores: {exc}")
    centers = [Coordinate(*c) for c in body.centers]
    try:
        records = feature_set.compute_records(centers)
    except IndexError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception as exc:
        logger.exception("Feature computation failed for image %s: %s", image_id, exc)
        raise HTTPException(status_code=500, detail=f"Failed to compute features: {exc}")
    return FeatureResponse(
        imageId=image_id,
        names=feature_set.feature_names(),
        records=records.tolist(),
    )
