"""API routes for fuzzy search."""
from fastapi import APIRouter, Depends, status
import logging

from knowtree.api.dependencies import get_settings
from knowtree.api.models import SearchRequest, SearchResponse, ErrorResponse
from knowtree.config.settings import Settings
from knowtree.search.index import perform_search

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/search",
    tags=["search"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    response_model=SearchResponse,
    summary="Fuzzy search",
    description="Search titles, content and tags across a flattened forest",
)
async def search_nodes(
    request: SearchRequest,
    settings: Settings = Depends(get_settings),
) -> SearchResponse:
    """Search a forest."""
    results = perform_search(
        request.forest,
        request.query,
        config=settings.search,
        limit=request.limit,
    )
    return SearchResponse(results=results, total=len(results))
