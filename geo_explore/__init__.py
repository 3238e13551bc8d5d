"""
Exploratory spatial and temporal analysis package.

This package provides tools for analysing spatial point patterns
(density surfaces, G/L functions with simulation envelopes) and for
exploring time series (calendar aggregation, rolling windows,
autocorrelation and STL decomposition).
"""

__version__ = "1.0.0"
__author__ = "Jason"
__description__ = "Exploratory point pattern and time series analysis"

# Note: Modules should be imported explicitly when needed to avoid
# side effects like loading configuration on import.

__all__ = [
    '__version__',
    '__author__',
    '__description__',
]
