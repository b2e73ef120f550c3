"""Data models for the knowledge tree."""
from .node import Node, NodeKind, ExternalLink, new_node_id
from .edge import Edge, PARENT_EDGE

__all__ = ["Node", "NodeKind", "ExternalLink", "new_node_id", "Edge", "PARENT_EDGE"]
