"""Shared API dependencies."""
from functools import lru_cache

from ..config.settings import Settings, load_settings


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process."""
    return load_settings()
