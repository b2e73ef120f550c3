"""Fuzzy search over a flattened knowledge tree."""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from rapidfuzz import fuzz

from ..config.settings import SearchConfig
from ..models.node import Node
from ..models.tree import iter_depth_first

log = logging.getLogger(__name__)

TAG_PREFIX = "tag:"


def flatten_forest(forest: Iterable[Node]) -> List[Node]:
    """Flatten a forest in pre-order.

    Each entry is a copy with no children; every descendant appears as
    its own entry.
    """
    return [node.shallow_copy() for node, _ in iter_depth_first(forest)]


@dataclass
class _Match:
    node: Node
    score: float
    exactness: float
    field_rank: int
    position: int
    title_exact: bool = False

    def sort_key(self) -> Tuple[float, bool, float, int, int]:
        return (
            self.score, not self.title_exact, -self.exactness,
            self.field_rank, self.position
        )


class SearchIndex:
    """Typo-tolerant search over node titles, content and tags.

    A field matches when its error score is within the threshold. The
    error is one minus the window similarity, plus a penalty that grows
    with how far into the field the match starts (``location / distance``).
    Lower scores rank first; among equal scores a title equal to the query
    as typed comes first.
    """

    def __init__(self, forest: Iterable[Node], config: Optional[SearchConfig] = None):
        """Build the index.

        Args:
            forest: Root nodes to index
            config: Optional search configuration

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or SearchConfig()
        self.config.validate()

        # Last copy of a repeated ID wins
        by_id: Dict[str, Node] = {}
        for node in flatten_forest(forest):
            by_id.pop(node.id, None)
            by_id[node.id] = node
        self.entries: List[Node] = list(by_id.values())

    def __len__(self) -> int:
        return len(self.entries)

    def search(self, query: str, limit: Optional[int] = None) -> List[Node]:
        """Search the index.

        Args:
            query: Free text, or ``tag:<name>`` for an exact tag filter
            limit: Maximum number of results

        Returns:
            List[Node]: Childless copies of matching nodes, best match first
        """
        query = (query or "").strip()
        if not query:
            return []

        if query.lower().startswith(TAG_PREFIX):
            results = self._search_tag(query[len(TAG_PREFIX):])
        else:
            results = self._search_fuzzy(query)

        if limit is not None:
            results = results[:limit]
        log.debug(f"Search {query!r} matched {len(results)} of {len(self.entries)} nodes")
        return [node.shallow_copy() for node in results]

    def _search_tag(self, tag: str) -> List[Node]:
        wanted = tag.strip().lower()
        if not wanted:
            return []
        return [
            node for node in self.entries
            if any(t.lower() == wanted for t in node.tags)
        ]

    def _search_fuzzy(self, query: str) -> List[Node]:
        pattern = query.lower()
        matches: List[_Match] = []

        for position, node in enumerate(self.entries):
            best: Optional[_Match] = None
            for field_rank, text in self._field_values(node):
                scored = self._score(pattern, text.lower())
                if scored is None:
                    continue
                score, exactness = scored
                candidate = _Match(
                    node, score, exactness, field_rank, position,
                    title_exact=node.title.strip() == query
                )
                if best is None or candidate.sort_key() < best.sort_key():
                    best = candidate
            if best is not None:
                matches.append(best)

        matches.sort(key=_Match.sort_key)
        return [match.node for match in matches]

    def _field_values(self, node: Node) -> List[Tuple[int, str]]:
        values: List[Tuple[int, str]] = []
        for rank, key in enumerate(self.config.keys):
            if key == "title":
                values.append((rank, node.title))
            elif key == "content" and node.content:
                values.append((rank, node.content))
            elif key == "tags":
                values.extend((rank, tag) for tag in node.tags)
        return [(rank, text) for rank, text in values if text.strip()]

    def _score(self, pattern: str, text: str) -> Optional[Tuple[float, float]]:
        """Score one field value, ``None`` when it falls outside the threshold."""
        if len(text) < len(pattern):
            score = 1 - fuzz.ratio(pattern, text) / 100
            if score > self.config.threshold:
                return None
            return score, fuzz.ratio(pattern, text)

        # Windows starting past threshold * distance can never pass
        window = text[:len(pattern) + int(self.config.threshold * self.config.distance)]
        while len(window) >= len(pattern):
            alignment = fuzz.partial_ratio_alignment(pattern, window)
            if alignment is None:
                return None
            location = alignment.dest_start
            score = (1 - alignment.score / 100) + location / self.config.distance
            if score <= self.config.threshold:
                return score, fuzz.ratio(pattern, text)
            # Retry on the windows that start before this one
            shorter = window[:location + len(pattern) - 1]
            if location == 0 or len(shorter) >= len(window):
                return None
            window = shorter
        return None


def perform_search(
    forest: Iterable[Node],
    query: str,
    config: Optional[SearchConfig] = None,
    limit: Optional[int] = None
) -> List[Node]:
    """Build a one-off index over a forest and search it."""
    query = (query or "").strip()
    if not query:
        return []
    return SearchIndex(forest, config).search(query, limit=limit)
