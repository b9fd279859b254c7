"""
Pydantic data models for the feature service API.

These models define the shapes of requests and responses used by the
backend.  Field names are camelCase to match the JSON contract.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class ImageInfo(BaseModel):
    """Metadata returned for an uploaded score archive."""

    imageId: str = Field(..., description="Unique identifier for the uploaded image")
    filename: str = Field(..., description="Original filename provided by the client")
    channels: List[str] = Field(..., description="Channel names contained in the archive")
    width: int = Field(..., description="Width of the score matrices in pixels")
    height: int = Field(..., description="Height of the score matrices in pixels")
    createdAt: datetime = Field(..., description="Timestamp of when the archive was uploaded")


class DiameterResponse(BaseModel):
    """Lattice points of the diameter through an endpoint."""

    endpoint: List[int] = Field(..., description="Requested endpoint (x, y)")
    points: List[List[int]] = Field(
        ..., description="Ordered (x, y) points from the endpoint side through the origin"
    )


class FeatureMetadataResponse(BaseModel):
    """Names, types and colours of the diameter features, in record order."""

    radius: int = Field(..., description="Radius of the ring the endpoints are taken from")
    endpoints: List[List[int]] = Field(..., description="Direction endpoints in feature order")
    channels: List[str] = Field(..., description="Channel names in feature order")
    numFeatures: int = Field(..., description="Number of values written per pixel")
    names: List[str] = Field(..., description="Feature name per record position")
    types: List[str] = Field(..., description="Feature type per record position")
    colors: List[str] = Field(..., description="Display colour per record position")


class FeatureRequest(BaseModel):
    """Pixels for which feature records should be computed."""

    centers: List[List[int]] = Field(
        ..., min_length=1, description="Image-absolute (x, y) pixel coordinates"
    )


class FeatureResponse(BaseModel):
    """One feature record per requested center."""

    imageId: str = Field(..., description="Identifier of the scored image")
    names: List[str] = Field(..., description="Feature name per record position")
    records: List[List[float]] = Field(..., description="Feature values, one row per center")
