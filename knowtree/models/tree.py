"""Traversal and aggregation helpers over node trees."""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import logging
import math

from .node import Node, NodeKind

log = logging.getLogger(__name__)


@dataclass
class ProgressBreakdown:
    """Completion counts over a node's immediate children."""
    completed: int = 0
    in_progress: int = 0
    not_started: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.in_progress + self.not_started


def iter_depth_first(forest: Iterable[Node]) -> Iterator[Tuple[Node, int]]:
    """Walk a forest in pre-order.

    Uses an explicit stack so deeply nested imports cannot exhaust the
    interpreter's recursion limit. Visiting order is identical to a
    recursive pre-order walk.

    Args:
        forest: Root nodes

    Yields:
        Tuple[Node, int]: Each node with its depth (roots are depth 0)
    """
    stack: List[Tuple[Node, int]] = [(root, 0) for root in reversed(list(forest))]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        for child in reversed(node.children):
            stack.append((child, depth + 1))


def count_nodes(forest: Iterable[Node]) -> int:
    """Count every node in a forest."""
    return sum(1 for _ in iter_depth_first(forest))


def find_node(forest: Iterable[Node], node_id: str) -> Optional[Node]:
    """Find the first node with the given ID in pre-order."""
    for node, _ in iter_depth_first(forest):
        if node.id == node_id:
            return node
    return None


def build_forest(flat_nodes: Iterable[Node]) -> List[Node]:
    """Rebuild a forest from nodes linked only by ``parent_id``.

    Nodes whose parent is not in the list become roots. Input order is kept
    for both roots and children. The input nodes are not modified.

    Args:
        flat_nodes: Nodes in any order, children lists are ignored

    Returns:
        List[Node]: Root nodes of the rebuilt forest
    """
    copies = [node.shallow_copy() for node in flat_nodes]
    by_id: Dict[str, Node] = {node.id: node for node in copies}

    roots: List[Node] = []
    for node in copies:
        parent = by_id.get(node.parent_id) if node.parent_id else None
        if parent is not None and parent is not node:
            parent.children.append(node)
        else:
            roots.append(node)

    reachable = count_nodes(roots)
    if reachable != len(copies):
        log.warning(
            f"{len(copies) - reachable} nodes are part of a parent cycle "
            f"and were left out of the forest"
        )
    return roots


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def aggregate_progress(node: Node) -> int:
    """Average progress of a node's immediate children.

    Missing progress counts as 0. Grandchildren are not considered.

    Returns:
        int: Rounded percentage, 0 for a childless node
    """
    if not node.children:
        return 0
    total = sum(child.progress or 0 for child in node.children)
    return _round_half_up(total / len(node.children))


def progress_breakdown(node: Node) -> ProgressBreakdown:
    """Count immediate children by completion state."""
    breakdown = ProgressBreakdown()
    for child in node.children:
        progress = child.progress or 0
        if progress >= 100:
            breakdown.completed += 1
        elif progress > 0:
            breakdown.in_progress += 1
        else:
            breakdown.not_started += 1
    return breakdown


def find_duplicate_root(roots: Iterable[Node], title: str) -> Optional[Node]:
    """Find an existing top-level container with the given title.

    Callers use this before an import to ask whether a second copy should
    be created. It has no effect on how the import tree is built.
    """
    for root in roots:
        if root.parent_id is None and root.kind == NodeKind.CONTAINER and root.title == title:
            return root
    return None
