"""
API routes for inspecting diameter masks.

Clients can request the lattice points of the diameter through any
integer endpoint, e.g. to visualise the masks used for scoring.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from .models import DiameterResponse
from ..services.runtime import get_diameter_cache

router = APIRouter()


@router.get("/diameters", response_model=DiameterResponse)
async def get_diameter(
    x: int = Query(..., description="Endpoint x coordinate"),
    y: int = Query(..., description="Endpoint y coordinate"),
) -> DiameterResponse:
    """Return the diameter one of whose endpoints is ``(x, y)``."""
    diameter = get_diameter_cache().get_diameter((x, y))
    return DiameterResponse(endpoint=[x, y], points=[[p.x, p.y] for p in diameter])
