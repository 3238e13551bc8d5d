# geo_explore/pipelines/stages/time_series_stages.py
"""Stages of the time series pipeline."""

from pathlib import Path
from typing import List, Union

from geo_explore.abstractions.types import Granularity
from geo_explore.infrastructure.logging import get_logger
from geo_explore.temporal import (
    aggregate, autocorrelation, build_time_series, decompose, filter_by_range,
    load_table, rolling_window, scan_gaps,
)
from geo_explore.visualization import TemporalPlotter, save_figure
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)


class LoadTableStage(PipelineStage):
    """Read the delimited table and parse its date column."""

    output_key = 'table'

    def __init__(self, source: Union[str, Path]):
        super().__init__()
        self.source = Path(source)

    @property
    def name(self) -> str:
        return "load_table"

    def execute(self, context) -> StageResult:
        settings = context.config.time_series
        table = load_table(self.source, date_column=settings['date_column'],
                           date_format=settings.get('date_format', '%m/%d/%Y'))
        value_column = settings['value_column']
        if value_column not in table.columns:
            raise KeyError(f"Value column '{value_column}' not found. "
                           f"Available: {list(table.columns)}")
        context.set(self.output_key, table)
        return StageResult(success=True, metrics={'n_rows': len(table)})


class IndexStage(PipelineStage):
    """Index the table by date."""

    output_key = 'indexed'

    @property
    def name(self) -> str:
        return "index"

    @property
    def requires(self) -> List[str]:
        return ['table']

    def execute(self, context) -> StageResult:
        settings = context.config.time_series
        indexed = build_time_series(context.get('table'), settings['date_column'],
                                    key=settings.get('key_column'))
        context.set(self.output_key, indexed)
        return StageResult(
            success=True,
            metrics={'first': str(indexed.index.min()), 'last': str(indexed.index.max())},
        )


class AggregateStage(PipelineStage):
    """Reduce the measurement column per calendar bucket."""

    output_key = 'aggregated'

    @property
    def name(self) -> str:
        return "aggregate"

    @property
    def requires(self) -> List[str]:
        return ['indexed']

    def execute(self, context) -> StageResult:
        settings = context.config.time_series
        values = context.get('indexed')[settings['value_column']]
        granularity = Granularity.from_value(settings['granularity'])
        aggregated = aggregate(values, granularity, func=settings.get('aggregate_func', 'mean'))
        gaps = scan_gaps(values, granularity)
        context.set(self.output_key, aggregated)

        warnings = []
        if len(gaps):
            warnings.append(f"{len(gaps)} {granularity.value} buckets have no records")
        return StageResult(
            success=True,
            metrics={'n_buckets': len(aggregated), 'n_gaps': len(gaps)},
            warnings=warnings,
        )


class RangeFilterStage(PipelineStage):
    """Restrict the aggregated series to the configured date range."""

    output_key = 'series'

    @property
    def name(self) -> str:
        return "range_filter"

    @property
    def requires(self) -> List[str]:
        return ['aggregated']

    def execute(self, context) -> StageResult:
        date_range = context.config.get('time_series.range', {}) or {}
        series = filter_by_range(context.get('aggregated'),
                                 date_range.get('start'), date_range.get('end'))
        context.set(self.output_key, series)

        warnings = [] if len(series) else ['range selects no rows']
        return StageResult(success=True, metrics={'n_selected': len(series)}, warnings=warnings)


class RollingStage(PipelineStage):
    """Positional rolling-window smoothing."""

    output_key = 'smoothed'

    @property
    def name(self) -> str:
        return "rolling"

    @property
    def requires(self) -> List[str]:
        return ['series']

    def execute(self, context) -> StageResult:
        settings = context.config.get('time_series.rolling', {})
        smoothed = rolling_window(context.get('series'), func=settings.get('func', 'mean'),
                                  before=settings.get('before', 0),
                                  after=settings.get('after', 0))
        context.set(self.output_key, smoothed)
        return StageResult(success=True, metrics={'length': len(smoothed)})


class AutocorrelationStage(PipelineStage):
    """Autocorrelation of the filtered series."""

    output_key = 'acf'

    @property
    def name(self) -> str:
        return "autocorrelation"

    @property
    def requires(self) -> List[str]:
        return ['series']

    def execute(self, context) -> StageResult:
        max_lag = context.config.get('time_series.autocorrelation.max_lag', 24)
        acf = autocorrelation(context.get('series'), max_lag)
        context.set(self.output_key, acf)
        return StageResult(
            success=True,
            metrics={'max_lag': max_lag, 'n_defined': int(acf.notna().sum())},
        )


class DecompositionStage(PipelineStage):
    """STL decomposition of the filtered series."""

    output_key = 'decomposition'

    @property
    def name(self) -> str:
        return "decomposition"

    @property
    def requires(self) -> List[str]:
        return ['series']

    def execute(self, context) -> StageResult:
        settings = context.config.get('time_series.decomposition', {})
        result = decompose(context.get('series'),
                           seasonal_window=settings.get('seasonal_window', 'periodic'),
                           period=settings.get('period'),
                           robust=settings.get('robust', False))
        context.set(self.output_key, result)
        return StageResult(
            success=True,
            metrics={'period': result.period,
                     'seasonal_strength': result.seasonal_strength,
                     'trend_strength': result.trend_strength},
        )


class TimeSeriesPlotStage(PipelineStage):
    """Render line, seasonal, ACF and decomposition figures."""

    output_key = 'figures'

    @property
    def name(self) -> str:
        return "plot_time_series"

    @property
    def requires(self) -> List[str]:
        return ['series']

    def execute(self, context) -> StageResult:
        plot_config = context.plot_config
        plotter = TemporalPlotter(plot_config)
        series = context.get('series')
        granularity = Granularity.from_value(context.config.get('time_series.granularity'))

        figures = {'series': plotter.plot_series(series, smoothed=context.get('smoothed'))}
        if granularity is not Granularity.YEAR:
            figures['seasonal'] = plotter.plot_seasonal(series, granularity)
        if context.get('acf') is not None:
            figures['acf'] = plotter.plot_acf(context.get('acf'), int(series.notna().sum()))
        if context.get('decomposition') is not None:
            figures['decomposition'] = plotter.plot_decomposition(context.get('decomposition'))

        if plot_config.interactive:
            logger.info("Time series figures are static; interactive mode applies to maps only")

        if context.config.get('plotting.save', True) and plot_config.output_dir is not None:
            for figure_name, figure in figures.items():
                context.outputs[figure_name] = save_figure(figure, figure_name, plot_config)
        context.set(self.output_key, figures)
        return StageResult(success=True, metrics={'n_figures': len(figures)})
