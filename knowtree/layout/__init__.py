"""Diagram layout for knowtree."""
from .radial import (
    AngularWindow,
    LayoutSession,
    Point,
    RadialLayout,
    RadialLayoutEngine,
    compute_radial_layout,
)

__all__ = [
    "AngularWindow",
    "LayoutSession",
    "Point",
    "RadialLayout",
    "RadialLayoutEngine",
    "compute_radial_layout",
]
