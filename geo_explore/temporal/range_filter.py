# geo_explore/temporal/range_filter.py
"""Select the part of a series that falls inside a calendar range."""

import datetime
import re
from typing import Optional, Tuple, Union

import numpy as np
import pandas as pd

from geo_explore.infrastructure.logging import get_logger

logger = get_logger(__name__)

OPEN_TOKENS = {None, '.', ''}

_TOKEN_FREQ = [
    (re.compile(r'^\d{4}$'), 'Y'),
    (re.compile(r'^\d{4}-\d{1,2}$'), 'M'),
    (re.compile(r'^\d{4}-\d{1,2}-\d{1,2}$'), 'D'),
]

Token = Optional[Union[str, datetime.date, pd.Timestamp, pd.Period, np.datetime64]]


def token_bounds(token: Token) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """First and last instant covered by a range token.

    ``"2000"`` covers the year, ``"2000-06"`` the month and ``"2000-06-15"``
    the day. A ``date`` covers its day; a ``Timestamp`` or ``datetime`` is
    an exact instant.
    """
    if isinstance(token, pd.Period):
        return token.start_time, token.end_time
    if isinstance(token, (pd.Timestamp, datetime.datetime, np.datetime64)):
        stamp = pd.Timestamp(token)
        return stamp, stamp
    if isinstance(token, datetime.date):
        day = pd.Period(token, freq='D')
        return day.start_time, day.end_time

    text = str(token).strip()
    for pattern, freq in _TOKEN_FREQ:
        if pattern.match(text):
            try:
                period = pd.Period(text, freq=freq)
            except ValueError as e:
                raise ValueError(f"Invalid date token {token!r}: {e}") from e
            return period.start_time, period.end_time

    try:
        stamp = pd.Timestamp(text)
    except ValueError as e:
        raise ValueError(f"Unrecognised date token {token!r}") from e
    return stamp, stamp


def filter_by_range(data: Union[pd.Series, pd.DataFrame],
                    start: Token = None,
                    end: Token = None) -> Union[pd.Series, pd.DataFrame]:
    """
    Rows whose date falls between ``start`` and ``end``, both inclusive.

    ``None`` or ``"."`` leaves that side open. A start token selects from
    the beginning of its period and an end token up to the end of its
    period, so ``filter_by_range(s, "2000-06", "2000-06")`` is all of June
    2000. On a ``PeriodIndex`` a row is selected when its period starts
    inside the range.
    """
    index = data.index
    if isinstance(index, pd.PeriodIndex):
        stamps = index.start_time
    elif isinstance(index, pd.DatetimeIndex):
        stamps = index
    else:
        raise TypeError(f"Range filter needs a date index, got {type(index).__name__}")

    mask = np.ones(len(data), dtype=bool)
    if not _is_open(start):
        lower, _ = token_bounds(start)
        mask &= np.asarray(stamps >= lower)
    if not _is_open(end):
        _, upper = token_bounds(end)
        mask &= np.asarray(stamps <= upper)

    selected = data[mask]
    logger.debug(f"Range {start!r}..{end!r} selected {len(selected)} of {len(data)} rows")
    return selected


def _is_open(token: Token) -> bool:
    return token is None or (isinstance(token, str) and token.strip() in OPEN_TOKENS)
