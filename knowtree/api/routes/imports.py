"""API routes for tabular import."""
from fastapi import APIRouter, Depends, status
import logging

from knowtree.api.dependencies import get_settings
from knowtree.api.models import ImportRequest, ImportResponse, ErrorResponse
from knowtree.config.settings import Settings
from knowtree.importer.reconciler import ImportReconciler
from knowtree.models.tree import count_nodes, find_duplicate_root

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/import",
    tags=["import"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    response_model=ImportResponse,
    summary="Build import tree",
    description="Reconstruct a single-rooted tree from tabular rows",
)
async def import_rows(
    request: ImportRequest,
    settings: Settings = Depends(get_settings),
) -> ImportResponse:
    """Reconstruct a tree from tabular rows."""
    duplicate = find_duplicate_root(request.existing_roots, request.root_title)
    if duplicate is not None:
        logger.info(f"Import title '{request.root_title}' duplicates root {duplicate.id}")

    root = ImportReconciler(settings.importer).build(
        request.rows, request.mapping, request.root_title
    )
    return ImportResponse(
        root=root,
        node_count=count_nodes([root]),
        duplicate_of=duplicate.id if duplicate else None,
    )
