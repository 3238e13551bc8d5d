"""Named error conditions raised by pipeline stages."""

from typing import Optional


class GeoExploreError(Exception):
    """Base error for exploration stages."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception


class GeometryLoadError(GeoExploreError):
    """Raised when a vector source cannot be read or parsed."""
    pass


class ProjectionError(GeoExploreError):
    """Raised when a CRS is missing, invalid or mismatched."""
    pass


class DuplicateIndexError(GeoExploreError):
    """Raised when two rows share a timestamp without a grouping key."""

    def __init__(self, message: str, duplicates=None,
                 original_exception: Optional[Exception] = None):
        super().__init__(message, original_exception)
        self.duplicates = list(duplicates) if duplicates is not None else []


class InsufficientDataError(GeoExploreError):
    """Raised when a series is too short for the requested operation."""
    pass


class TimeSeriesLoadError(GeoExploreError):
    """Raised when a tabular source or its date column cannot be read."""
    pass

