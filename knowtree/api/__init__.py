"""HTTP adapter for knowtree."""
