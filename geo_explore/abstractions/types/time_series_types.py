"""
Data types for time series exploration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

import pandas as pd

PERIODIC = "periodic"


class Granularity(Enum):
    """Calendar bucket sizes for aggregation."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def freq(self) -> str:
        """pandas period frequency alias."""
        return {
            Granularity.DAY: 'D',
            Granularity.WEEK: 'W-SUN',  # Monday-start weeks
            Granularity.MONTH: 'M',
            Granularity.YEAR: 'Y',
        }[self]

    @classmethod
    def from_value(cls, value) -> 'Granularity':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = [g.value for g in cls]
            raise ValueError(f"Unknown granularity '{value}'. Valid: {valid}")


@dataclass
class DecompositionResult:
    """Seasonal, trend and remainder components of a series."""
    observed: pd.Series
    seasonal: pd.Series
    trend: pd.Series
    remainder: pd.Series
    period: int
    seasonal_window: Union[int, str]

    def reconstruct(self) -> pd.Series:
        """seasonal + trend + remainder"""
        return self.seasonal + self.trend + self.remainder

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            'observed': self.observed,
            'trend': self.trend,
            'seasonal': self.seasonal,
            'remainder': self.remainder,
        })

    @property
    def seasonal_strength(self) -> float:
        """max(0, 1 - Var(remainder) / Var(seasonal + remainder))"""
        detrended = (self.seasonal + self.remainder).var()
        if not detrended or pd.isna(detrended):
            return 0.0
        return float(max(0.0, 1.0 - self.remainder.var() / detrended))

    @property
    def trend_strength(self) -> float:
        """max(0, 1 - Var(remainder) / Var(trend + remainder))"""
        deseasonal = (self.trend + self.remainder).var()
        if not deseasonal or pd.isna(deseasonal):
            return 0.0
        return float(max(0.0, 1.0 - self.remainder.var() / deseasonal))
