# geo_explore/abstractions/types/__init__.py
"""Type definitions shared by the spatial and temporal modules."""

from .point_pattern_types import PointPattern, EnvelopeResult, SummaryFunction
from .time_series_types import Granularity, DecompositionResult, PERIODIC

__all__ = [
    'PointPattern',
    'EnvelopeResult',
    'SummaryFunction',
    'Granularity',
    'DecompositionResult',
    'PERIODIC',
]
