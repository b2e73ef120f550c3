"""Edge model for the knowledge tree."""
from typing import Dict, Any
from pydantic import BaseModel, Field

PARENT_EDGE = "parent"


class Edge(BaseModel):
    """An edge between two tree nodes."""

    source: str = Field(description="ID of the source node")
    target: str = Field(description="ID of the target node")
    type: str = Field(default=PARENT_EDGE, description="Type of relationship")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata for the edge"
    )
