"""Configuration for knowtree."""
from .settings import ImportConfig, LayoutConfig, SearchConfig, Settings, load_settings

__all__ = ["ImportConfig", "LayoutConfig", "SearchConfig", "Settings", "load_settings"]
