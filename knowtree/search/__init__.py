"""Search for knowtree."""
from .index import SearchIndex, flatten_forest, perform_search

__all__ = ["SearchIndex", "flatten_forest", "perform_search"]
