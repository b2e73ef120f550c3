"""Configuration for the import, layout and search components."""
import math
import os
import logging
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import find_dotenv, load_dotenv  # type: ignore

from ..exceptions import ConfigurationError

log = logging.getLogger(__name__)


@dataclass
class ImportConfig:
    """Configuration for the import reconciler."""
    untitled_prefix: str = "Untitled"
    tag_separator: str = ","


@dataclass
class LayoutConfig:
    """Configuration for the radial layout engine."""
    radius_step: float = 200.0
    origin: Tuple[float, float] = (0.0, 0.0)
    spiral_angle_step: float = 0.5
    spiral_growth: float = 1.0
    max_spiral_steps: int = 10000
    # Extra radius for every node when the forest has several roots
    root_offset: float = 0.0

    def validate(self) -> None:
        """Validate layout configuration.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if not math.isfinite(self.radius_step) or self.radius_step < 0:
            raise ConfigurationError(
                f"radius_step must be a non-negative number, got {self.radius_step}"
            )
        if not math.isfinite(self.root_offset) or self.root_offset < 0:
            raise ConfigurationError(
                f"root_offset must be a non-negative number, got {self.root_offset}"
            )
        if self.spiral_growth <= 0:
            raise ConfigurationError(
                f"spiral_growth must be positive, got {self.spiral_growth}"
            )
        if self.spiral_angle_step <= 0:
            raise ConfigurationError(
                f"spiral_angle_step must be positive, got {self.spiral_angle_step}"
            )
        if self.max_spiral_steps < 1:
            raise ConfigurationError(
                f"max_spiral_steps must be at least 1, got {self.max_spiral_steps}"
            )


@dataclass
class SearchConfig:
    """Configuration for the fuzzy search index."""
    threshold: float = 0.3
    distance: int = 100
    keys: Tuple[str, ...] = ("title", "content", "tags")

    def validate(self) -> None:
        """Validate search configuration.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(
                f"threshold must be between 0 and 1, got {self.threshold}"
            )
        if self.distance <= 0:
            raise ConfigurationError(
                f"distance must be positive, got {self.distance}"
            )
        unknown = set(self.keys) - {"title", "content", "tags"}
        if unknown:
            raise ConfigurationError(f"Unknown search keys: {sorted(unknown)}")


@dataclass
class Settings:
    """Top-level knowtree settings."""
    importer: ImportConfig = field(default_factory=ImportConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    def validate(self) -> None:
        """Validate every section."""
        self.layout.validate()
        self.search.validate()


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings() -> Settings:
    """Load settings from KNOWTREE_* environment variables.

    A ``.env`` file in the working directory is loaded first.

    Returns:
        Settings: Validated settings

    Raises:
        ConfigurationError: If a variable cannot be parsed or is out of range
    """
    load_dotenv(find_dotenv(usecwd=True))  # type: ignore

    settings = Settings(
        importer=ImportConfig(
            untitled_prefix=os.environ.get("KNOWTREE_UNTITLED_PREFIX", "Untitled"),
            tag_separator=os.environ.get("KNOWTREE_TAG_SEPARATOR", ","),
        ),
        layout=LayoutConfig(
            radius_step=_env_float("KNOWTREE_RADIUS_STEP", 200.0),
            spiral_angle_step=_env_float("KNOWTREE_SPIRAL_ANGLE_STEP", 0.5),
            spiral_growth=_env_float("KNOWTREE_SPIRAL_GROWTH", 1.0),
            max_spiral_steps=int(_env_float("KNOWTREE_MAX_SPIRAL_STEPS", 10000)),
            root_offset=_env_float("KNOWTREE_ROOT_OFFSET", 0.0),
        ),
        search=SearchConfig(
            threshold=_env_float("KNOWTREE_SEARCH_THRESHOLD", 0.3),
            distance=int(_env_float("KNOWTREE_SEARCH_DISTANCE", 100)),
        ),
    )
    try:
        settings.validate()
    except ConfigurationError as e:
        log.error(f"Invalid settings: {e}")
        raise
    return settings
