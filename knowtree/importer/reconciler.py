"""Reconstruct a knowledge tree from flat tabular rows."""
from typing import Any, Dict, Mapping, Optional, Sequence, Union
import logging
import math
import re

from pydantic import BaseModel, Field, ValidationError

from ..config.settings import ImportConfig
from ..exceptions import ImportMappingError
from ..models.node import Node, NodeKind, ExternalLink

log = logging.getLogger(__name__)

# parseInt-style: leading integer, rest ignored
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class FieldMap(BaseModel):
    """Maps logical node fields to source column names."""

    title: str = Field(description="Column holding the node title")
    type: Optional[str] = Field(default=None, description="Column holding the node kind")
    parent: Optional[str] = Field(default=None, description="Column holding the parent row number")
    content: Optional[str] = Field(default=None, description="Column holding the node content")
    tags: Optional[str] = Field(default=None, description="Column holding comma separated tags")
    link: Optional[str] = Field(default=None, description="Column holding an external URL")


class ImportReconciler:
    """Builds a single-rooted tree from rows and a column mapping."""

    def __init__(self, config: Optional[ImportConfig] = None):
        """Initialize reconciler.

        Args:
            config: Optional import configuration
        """
        self.config = config or ImportConfig()

    def build(
        self,
        rows: Sequence[Mapping[str, Any]],
        mapping: Union[FieldMap, Mapping[str, Optional[str]]],
        root_title: str
    ) -> Node:
        """Build the import tree.

        Rows are numbered from 1 in order; parent references name those
        numbers. A row whose parent reference is blank, unknown, points at
        itself or would close a cycle becomes a child of the generated root.
        No row is ever dropped.

        Args:
            rows: Decoded tabular rows sharing one set of column headers
            mapping: Logical field to column name mapping
            root_title: Title of the generated root

        Returns:
            Node: Generated container root wrapping the reconstructed forest

        Raises:
            ImportMappingError: If the mapping has no title column
        """
        field_map = self._coerce_mapping(mapping)

        # Normalize rows, keyed by 1-based row number
        index: Dict[Any, Node] = {}
        parent_refs: Dict[int, Any] = {}
        for position, row in enumerate(rows):
            row_number = position + 1
            index[row_number] = self._standardize(row, row_number, field_map)
            if field_map.parent:
                parent_refs[row_number] = row.get(field_map.parent)

        root = Node(
            title=root_title.strip() or f"{self.config.untitled_prefix} import",
            kind=NodeKind.CONTAINER,
            metadata={"generated_root": True},
        )

        # Link each row to its parent or fall back to the root
        parent_of: Dict[int, Any] = {}
        orphans = 0
        for row_number, node in index.items():
            ref = parent_refs.get(row_number)
            key = self._parent_key(ref)
            parent = index.get(key) if key is not None else None

            if parent is not None and parent is not node and not self._closes_cycle(
                row_number, key, parent_of
            ):
                parent_of[row_number] = key
                node.parent_id = parent.id
                parent.children.append(node)
                continue

            if key is not None:
                orphans += 1
                log.debug(
                    f"Row {row_number} has unresolvable parent {ref!r}, "
                    f"attaching to root"
                )
            node.parent_id = root.id
            root.children.append(node)

        log.info(
            f"Imported {len(index)} rows under '{root_title}' "
            f"({len(root.children)} top-level, {orphans} orphaned)"
        )
        return root

    def _coerce_mapping(
        self, mapping: Union[FieldMap, Mapping[str, Optional[str]]]
    ) -> FieldMap:
        if isinstance(mapping, FieldMap):
            return mapping
        try:
            return FieldMap(**dict(mapping))
        except ValidationError as e:
            log.error(f"Invalid import mapping: {e}")
            raise ImportMappingError(
                "Import mapping must name a title column"
            ) from e

    def _standardize(
        self,
        row: Mapping[str, Any],
        row_number: int,
        field_map: FieldMap
    ) -> Node:
        def value(field: Optional[str]) -> str:
            return _cell_text(row.get(field)) if field else ""

        title = value(field_map.title) or f"{self.config.untitled_prefix} {row_number}"

        kind = NodeKind.FOLDER if value(field_map.type).lower() == "folder" else NodeKind.LEAF

        raw_tags = value(field_map.tags)
        tags = [
            tag.strip()
            for tag in raw_tags.split(self.config.tag_separator)
            if tag.strip()
        ] if raw_tags else []

        link = value(field_map.link)
        links = [ExternalLink(type="link", url=link)] if link else []

        return Node(
            title=title,
            kind=kind,
            content=value(field_map.content) or None,
            tags=tags,
            external_links=links,
            metadata={"source_row": row_number},
        )

    @staticmethod
    def _parent_key(ref: Any) -> Any:
        """Turn a raw parent reference into an index key.

        Numeric coercion comes first; otherwise the raw text is the key.
        Blank references and row 0 mean "no parent" and yield ``None``.
        """
        text = _cell_text(ref)
        if not text:
            return None
        match = _LEADING_INT.match(text)
        if match:
            number = int(match.group(1))
            return number if number != 0 else None
        return text

    @staticmethod
    def _closes_cycle(row_number: int, parent_key: Any, parent_of: Dict[int, Any]) -> bool:
        current = parent_key
        while current is not None:
            if current == row_number:
                return True
            current = parent_of.get(current)
        return False


def _cell_text(value: Any) -> str:
    """Render a spreadsheet cell as trimmed text, blank for empty cells."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def build_import_tree(
    rows: Sequence[Mapping[str, Any]],
    mapping: Union[FieldMap, Mapping[str, Optional[str]]],
    root_title: str,
    config: Optional[ImportConfig] = None
) -> Node:
    """Build a single-rooted import tree from rows.

    See ImportReconciler.build.
    """
    return ImportReconciler(config).build(rows, mapping, root_title)
