"""Node model for the knowledge tree."""
from enum import Enum
from typing import Dict, Any, List, Optional
import uuid

from pydantic import BaseModel, Field, field_validator


def new_node_id() -> str:
    """Generate a fresh opaque node identifier."""
    return uuid.uuid4().hex


class NodeKind(str, Enum):
    """Kind of a tree node."""

    CONTAINER = "container"
    FOLDER = "folder"
    LEAF = "leaf"

    @classmethod
    def parse(cls, value: Any) -> "NodeKind":
        """Parse a kind, accepting the syllabus/folder/file vocabulary.

        Raises:
            ValueError: If the value names no known kind
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _KIND_ALIASES.get(key, key)
        return cls(key)


_KIND_ALIASES = {
    "syllabus": "container",
    "file": "leaf",
}


class ExternalLink(BaseModel):
    """A link from a node to an external resource."""

    type: str = Field(default="link", description="Kind of link")
    url: str = Field(description="Target URL")
    label: Optional[str] = Field(default=None, description="Display label")


class Node(BaseModel):
    """A node in the knowledge tree."""

    id: str = Field(default_factory=new_node_id, description="Unique identifier for the node")
    title: str = Field(description="Display title of the node")
    kind: NodeKind = Field(default=NodeKind.LEAF, description="Container, folder or leaf")
    parent_id: Optional[str] = Field(default=None, description="ID of the parent node")
    children: List["Node"] = Field(default_factory=list, description="Ordered child nodes")
    content: Optional[str] = Field(default=None, description="Free text or HTML payload")
    tags: List[str] = Field(default_factory=list, description="Tags, unique within the node")
    external_links: List[ExternalLink] = Field(
        default_factory=list,
        description="Links to external resources"
    )
    progress: Optional[float] = Field(
        default=None, ge=0, le=100,
        description="Completion percentage"
    )
    pinned: bool = Field(default=False, description="Display hint")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata for the node"
    )

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: Any) -> NodeKind:
        return NodeKind.parse(value)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("title must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: List[str]) -> List[str]:
        seen = set()
        unique = []
        for tag in value:
            if tag not in seen:
                seen.add(tag)
                unique.append(tag)
        return unique

    @property
    def is_generated_root(self) -> bool:
        """Whether this node is a synthetic import wrapper."""
        return bool(self.metadata.get("generated_root"))

    def shallow_copy(self) -> "Node":
        """Copy of this node without children.

        Mutable fields are copied so the result shares no state with the
        source tree.
        """
        return self.model_copy(
            update={
                "children": [],
                "tags": list(self.tags),
                "external_links": [link.model_copy() for link in self.external_links],
                "metadata": dict(self.metadata),
            }
        )


Node.model_rebuild()
