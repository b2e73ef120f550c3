"""API routes for radial layout."""
from dataclasses import replace
from fastapi import APIRouter, Depends, status
import logging

from knowtree.api.dependencies import get_settings
from knowtree.api.models import (
    LayoutRequest, LayoutResponse, LayoutPoint, LayoutEdge,
    ErrorResponse
)
from knowtree.config.settings import Settings
from knowtree.layout.radial import RadialLayoutEngine

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/layout",
    tags=["layout"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    response_model=LayoutResponse,
    summary="Radial layout",
    description="Assign non-colliding diagram positions to every node of a forest",
)
async def layout_forest(
    request: LayoutRequest,
    settings: Settings = Depends(get_settings),
) -> LayoutResponse:
    """Lay out a forest."""
    config = settings.layout
    if request.radius_step is not None:
        config = replace(config, radius_step=request.radius_step)
    if request.root_offset is not None:
        config = replace(config, root_offset=request.root_offset)

    layout = RadialLayoutEngine(config).layout(request.forest)
    return LayoutResponse(
        positions={
            node_id: LayoutPoint(x=point.x, y=point.y)
            for node_id, point in layout.positions.items()
        },
        edges=[
            LayoutEdge(source=edge.source, target=edge.target)
            for edge in layout.edges
        ],
    )
