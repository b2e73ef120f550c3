"""Tabular import for knowtree."""
from .reconciler import FieldMap, ImportReconciler, build_import_tree
from .tabular import load_rows

__all__ = ["FieldMap", "ImportReconciler", "build_import_tree", "load_rows"]
