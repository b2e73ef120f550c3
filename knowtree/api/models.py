"""Pydantic models for request/response validation in the API."""
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from ..importer.reconciler import FieldMap
from ..models.node import Node


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: Any = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code for programmatic handling")
    path: Optional[str] = Field(None, description="Path where the error occurred")
    timestamp: datetime = Field(default_factory=_utcnow, description="Timestamp of the error")


# Import models
class ImportRequest(BaseModel):
    """Request to build a tree from tabular rows."""

    rows: List[Dict[str, Any]] = Field(..., description="Decoded rows keyed by column header")
    mapping: FieldMap = Field(..., description="Logical field to column mapping")
    root_title: str = Field(..., min_length=1, description="Title of the generated root")
    existing_roots: List[Node] = Field(
        default_factory=list,
        description="Existing top-level nodes to check for a duplicate title"
    )


class ImportResponse(BaseModel):
    """Reconstructed import tree."""

    root: Node = Field(..., description="Generated root wrapping the imported rows")
    node_count: int = Field(..., description="Number of nodes including the root")
    duplicate_of: Optional[str] = Field(
        None, description="ID of an existing root with the same title"
    )


# Layout models
class LayoutRequest(BaseModel):
    """Request to lay out a forest."""

    forest: List[Node] = Field(..., description="Root nodes to lay out")
    radius_step: Optional[float] = Field(None, description="Override for the ring spacing")
    root_offset: Optional[float] = Field(
        None, description="Override for the extra radius used when there are several roots"
    )


class LayoutPoint(BaseModel):
    """Position of one node."""

    x: float
    y: float


class LayoutEdge(BaseModel):
    """Parent to child edge."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias="from", description="Parent node ID")
    target: str = Field(..., alias="to", description="Child node ID")


class LayoutResponse(BaseModel):
    """Laid out forest."""

    positions: Dict[str, LayoutPoint] = Field(..., description="Position per node ID")
    edges: List[LayoutEdge] = Field(..., description="Traversed parent to child edges")


# Search models
class SearchRequest(BaseModel):
    """Search request over a forest."""

    forest: List[Node] = Field(..., description="Root nodes to search")
    query: str = Field(..., description="Search query, or tag:<name>")
    limit: Optional[int] = Field(None, ge=1, description="Maximum number of results")


class SearchResponse(BaseModel):
    """Ranked search results."""

    results: List[Node] = Field(..., description="Matching nodes without children, best first")
    total: int = Field(..., description="Number of results")
