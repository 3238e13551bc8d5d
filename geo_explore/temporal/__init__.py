"""Time series exploration."""

from .loader import load_table, parse_dates
from .indexer import build_time_series
from .aggregation import aggregate, scan_gaps
from .range_filter import filter_by_range
from .rolling import rolling_window, PositionalWindowIndexer
from .autocorrelation import autocorrelation, confidence_bound
from .decomposition import decompose, infer_period

__all__ = [
    'load_table',
    'parse_dates',
    'build_time_series',
    'aggregate',
    'scan_gaps',
    'filter_by_range',
    'rolling_window',
    'PositionalWindowIndexer',
    'autocorrelation',
    'confidence_bound',
    'decompose',
    'infer_period',
]
