"""Radial layout engine for knowledge tree diagrams.

Every root gets an equal sector of the circle. A node sits at the middle
angle of its window, at a radius proportional to its depth, and its window
is split evenly among its children. Positions are snapped to integer grid
cells; a cell that is already taken sends the point along an outward spiral
until a free cell is found, so no two nodes ever share a cell.

With several roots every root wants the origin, so all but the first end
up spiralled around it. Setting ``root_offset`` pushes the whole forest
out by that radius so each root sits inside its own sector.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Set, Tuple
import logging
import math

import networkx as nx
import numpy as np

from ..config.settings import LayoutConfig
from ..models.edge import Edge, PARENT_EDGE
from ..models.node import Node

log = logging.getLogger(__name__)

FULL_CIRCLE = 2 * math.pi

Cell = Tuple[int, int]


class Point(NamedTuple):
    """A laid out position."""
    x: float
    y: float


@dataclass(frozen=True)
class AngularWindow:
    """The ``[start, end)`` range of angles given to a node."""
    start: float
    end: float

    @property
    def width(self) -> float:
        return self.end - self.start

    @property
    def middle(self) -> float:
        return (self.start + self.end) / 2

    def split(self, parts: int) -> List["AngularWindow"]:
        """Split into ``parts`` equal consecutive windows."""
        bounds = np.linspace(self.start, self.end, parts + 1)
        return [
            AngularWindow(float(bounds[j]), float(bounds[j + 1]))
            for j in range(parts)
        ]


def _grid_round(value: float) -> int:
    return int(math.floor(value + 0.5))


class LayoutSession:
    """Occupied grid cells for a single layout run."""

    def __init__(self, config: LayoutConfig):
        self.config = config
        self.occupied: Set[Cell] = set()
        self.displaced = 0

    def claim(self, x: float, y: float) -> Cell:
        """Claim the cell nearest to ``(x, y)`` or the first free cell on its spiral.

        Returns:
            Cell: The claimed grid cell
        """
        cell = (_grid_round(x), _grid_round(y))
        if cell in self.occupied:
            cell = self._spiral(x, y)
            self.displaced += 1
        self.occupied.add(cell)
        return cell

    def _spiral(self, x: float, y: float) -> Cell:
        growth = self.config.spiral_growth
        angle_step = self.config.spiral_angle_step
        steps = self.config.max_spiral_steps

        for step in range(1, steps + 1):
            radius = step * growth
            angle = step * angle_step
            cell = (
                _grid_round(x + radius * float(np.cos(angle))),
                _grid_round(y + radius * float(np.sin(angle))),
            )
            if cell not in self.occupied:
                return cell

        # Spiral exhausted, keep walking outward along +x
        log.warning(f"Spiral search exhausted after {steps} steps at ({x:.1f}, {y:.1f})")
        offset = _grid_round(steps * growth)
        base_y = _grid_round(y)
        while True:
            offset += 1
            cell = (_grid_round(x) + offset, base_y)
            if cell not in self.occupied:
                return cell


@dataclass
class RadialLayout:
    """Positions and tree edges produced by one layout run."""
    positions: Dict[str, Point] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    windows: Dict[str, AngularWindow] = field(default_factory=dict)

    def to_networkx(self) -> nx.DiGraph:
        """Export as a directed graph with ``pos`` node attributes."""
        G: nx.DiGraph = nx.DiGraph()
        for node_id, point in self.positions.items():
            G.add_node(node_id, pos=(point.x, point.y))
        for edge in self.edges:
            G.add_edge(edge.source, edge.target, type=edge.type)
        return G

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict form for serialization."""
        return {
            "positions": {
                node_id: {"x": point.x, "y": point.y}
                for node_id, point in self.positions.items()
            },
            "edges": [{"from": edge.source, "to": edge.target} for edge in self.edges],
        }


class RadialLayoutEngine:
    """Lays out a forest as non-colliding points around an origin."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        """Initialize layout engine.

        Args:
            config: Optional layout configuration

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or LayoutConfig()
        self.config.validate()

    def layout(self, forest: Iterable[Node]) -> RadialLayout:
        """Compute positions for every node in a forest.

        The result depends only on the forest's structure and child order.
        Nodes are not modified.

        Args:
            forest: Root nodes

        Returns:
            RadialLayout: Positions, edges and angular windows
        """
        roots = list(forest)
        session = LayoutSession(self.config)
        result = RadialLayout()
        if not roots:
            return result

        offset = self.config.root_offset if len(roots) > 1 else 0.0
        sectors = AngularWindow(0.0, FULL_CIRCLE).split(len(roots))
        stack: List[Tuple[Node, AngularWindow, int, Optional[str]]] = [
            (root, sector, 0, None)
            for root, sector in reversed(list(zip(roots, sectors)))
        ]

        while stack:
            node, window, depth, parent_id = stack.pop()
            result.positions[node.id] = self._place(session, window, depth, offset)
            result.windows[node.id] = window
            if parent_id is not None:
                result.edges.append(Edge(source=parent_id, target=node.id, type=PARENT_EDGE))

            if node.children:
                child_windows = window.split(len(node.children))
                for child, child_window in reversed(list(zip(node.children, child_windows))):
                    stack.append((child, child_window, depth + 1, node.id))

        log.debug(
            f"Laid out {len(result.positions)} nodes, "
            f"{session.displaced} displaced by collisions"
        )
        return result

    def _place(
        self,
        session: LayoutSession,
        window: AngularWindow,
        depth: int,
        offset: float = 0.0
    ) -> Point:
        origin_x, origin_y = self.config.origin
        radius = offset + depth * self.config.radius_step
        theta = window.middle
        cell = session.claim(
            origin_x + radius * float(np.cos(theta)),
            origin_y + radius * float(np.sin(theta)),
        )
        return Point(float(cell[0]), float(cell[1]))


def compute_radial_layout(
    forest: Iterable[Node],
    config: Optional[LayoutConfig] = None
) -> RadialLayout:
    """Lay out a forest with a fresh session.

    See RadialLayoutEngine.layout.
    """
    return RadialLayoutEngine(config).layout(forest)
