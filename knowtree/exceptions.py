"""Custom exceptions for knowtree."""

class KnowtreeError(Exception):
    """Base exception for knowtree operations."""
    pass


class ImportMappingError(KnowtreeError):
    """Column mapping cannot drive an import."""
    pass


class UnsupportedFormatError(KnowtreeError):
    """Tabular source is not a CSV or XLSX file."""
    pass


class ConfigurationError(KnowtreeError):
    """Invalid configuration value."""
    pass
