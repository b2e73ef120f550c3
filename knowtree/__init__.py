"""Knowledge tree import, radial layout and fuzzy search."""
from .importer.reconciler import FieldMap, ImportReconciler, build_import_tree
from .layout.radial import RadialLayout, RadialLayoutEngine, compute_radial_layout
from .models.node import Node, NodeKind, ExternalLink
from .search.index import SearchIndex, flatten_forest, perform_search

__version__ = "0.1.0"

__all__ = [
    "FieldMap",
    "ImportReconciler",
    "build_import_tree",
    "RadialLayout",
    "RadialLayoutEngine",
    "compute_radial_layout",
    "Node",
    "NodeKind",
    "ExternalLink",
    "SearchIndex",
    "flatten_forest",
    "perform_search",
]
