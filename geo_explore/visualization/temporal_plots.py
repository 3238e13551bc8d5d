# geo_explore/visualization/temporal_plots.py
"""Figures for time series exploration."""

from typing import Optional, Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

from geo_explore.abstractions.types import DecompositionResult, Granularity
from geo_explore.temporal.autocorrelation import confidence_bound
from .plot_config import PlotConfig


def _timestamps(index: pd.Index) -> pd.DatetimeIndex:
    if isinstance(index, pd.PeriodIndex):
        return index.to_timestamp()
    return pd.DatetimeIndex(index)


class TemporalPlotter:
    """Line, seasonal, ACF and decomposition plots."""

    def __init__(self, config: Optional[PlotConfig] = None):
        self.config = config or PlotConfig()

    def plot_series(self, series: pd.Series,
                    smoothed: Optional[pd.Series] = None,
                    title: Optional[str] = None) -> Figure:
        """
        Line plot of a series, optionally with a smoothed overlay.

        Args:
            series: Date-indexed measurements
            smoothed: Rolling-window output on the same index
            title: Axes title; defaults to the series name

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.config.figsize)
        ax.plot(_timestamps(series.index), series.to_numpy(), color='tab:blue',
                alpha=0.6 if smoothed is not None else 1.0, label=series.name or 'observed')

        if smoothed is not None:
            ax.plot(_timestamps(smoothed.index), smoothed.to_numpy(), color='tab:orange',
                    linewidth=2, label='rolling')
            ax.legend()

        ax.set_title(title or f"{series.name or 'Series'}", fontsize=14, fontweight='bold')
        ax.set_xlabel('Date')
        fig.autofmt_xdate()
        return fig

    def plot_seasonal(self, series: pd.Series,
                      granularity: Union[Granularity, str] = Granularity.MONTH) -> Figure:
        """One line per year against the month, week or day of year."""
        granularity = Granularity.from_value(granularity)
        stamps = _timestamps(series.index)

        if granularity is Granularity.MONTH:
            position, label = stamps.month, 'Month'
        elif granularity is Granularity.WEEK:
            position, label = stamps.isocalendar().week.to_numpy(), 'Week of year'
        elif granularity is Granularity.DAY:
            position, label = stamps.dayofyear, 'Day of year'
        else:
            raise ValueError("Seasonal plots need a sub-annual granularity")

        frame = pd.DataFrame({
            'year': stamps.year,
            'position': np.asarray(position),
            'value': series.to_numpy(),
        })

        fig, ax = plt.subplots(figsize=self.config.figsize)
        sns.lineplot(data=frame, x='position', y='value', hue='year',
                     palette=self.config.cmap, marker='o', ax=ax)
        ax.set_xlabel(label)
        ax.set_ylabel(series.name or 'value')
        ax.set_title('Seasonal plot', fontsize=14, fontweight='bold')
        return fig

    def plot_acf(self, acf: pd.Series, n_obs: int) -> Figure:
        """Bar plot of autocorrelation by lag with the white-noise band."""
        fig, ax = plt.subplots(figsize=self.config.figsize)
        ax.bar(acf.index, acf.fillna(0).to_numpy(), width=0.3, color='tab:blue')

        bound = confidence_bound(n_obs)
        ax.axhspan(-bound, bound, color='tab:blue', alpha=0.15)
        ax.axhline(0, color='black', linewidth=0.8)

        ax.set_xlabel('Lag')
        ax.set_ylabel('ACF')
        ax.set_title('Autocorrelation', fontsize=14, fontweight='bold')
        return fig

    def plot_decomposition(self, result: DecompositionResult) -> Figure:
        """Observed, trend, seasonal and remainder panels sharing the x axis."""
        frame = result.to_frame()
        stamps = _timestamps(frame.index)

        fig, axes = plt.subplots(4, 1, figsize=(self.config.figsize[0], self.config.figsize[1] * 1.4),
                                 sharex=True)
        for ax, column in zip(axes, ['observed', 'trend', 'seasonal', 'remainder']):
            if column == 'remainder':
                ax.scatter(stamps, frame[column], s=8, color='tab:grey')
                ax.axhline(0, color='black', linewidth=0.8)
            else:
                ax.plot(stamps, frame[column], color='tab:blue')
            ax.set_ylabel(column.capitalize())

        axes[0].set_title(f'STL decomposition (period {result.period}, '
                          f'seasonal window {result.seasonal_window})',
                          fontsize=14, fontweight='bold')
        fig.autofmt_xdate()
        return fig
