# geo_explore/cli.py
"""
Command-line entry point.

    geo-explore point-pattern data/layers --epsg 32610 --sigma 500 --sigma 1000
    geo-explore time-series data/measurements.csv --granularity month --start 2001 --end 2010
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from geo_explore.config import Config
from geo_explore.exceptions import GeoExploreError
from geo_explore.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)

# Errors reported as a one-line message instead of a traceback
USER_ERRORS = (GeoExploreError, ValueError, KeyError, TypeError)


def _load_config(config_file: Optional[str], overrides: Dict[str, Any]) -> Config:
    config = Config(Path(config_file) if config_file else None)
    for key, value in overrides.items():
        if value is not None and value != ():
            config.set(key, value)
    return config


def _fail(error: Exception):
    message = error.args[0] if isinstance(error, KeyError) and error.args else error
    click.echo(f"❌ {type(error).__name__}: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file')
@click.pass_context
def cli(ctx, verbose, config_file):
    """Exploratory spatial point pattern and time series analysis."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config_file'] = config_file


@cli.command('point-pattern')
@click.argument('source', type=click.Path(exists=True))
@click.option('--points-layer', help='Observation layer name')
@click.option('--window-layer', help='Boundary layer name')
@click.option('--epsg', type=int, help='Target projected CRS')
@click.option('--sigma', 'sigmas', type=float, multiple=True, help='Kernel bandwidth (repeatable)')
@click.option('--function', 'functions', type=click.Choice(['G', 'K', 'L'], case_sensitive=False),
              multiple=True, help='Summary function (repeatable)')
@click.option('--nsim', type=int, help='Number of CSR simulations')
@click.option('--nrank', type=int, help='Envelope rank')
@click.option('--seed', type=int, help='Random seed for simulations')
@click.option('--workers', type=int, help='Worker processes for simulations')
@click.option('--output-dir', type=click.Path(file_okay=False), help='Directory for figures')
@click.option('--interactive', is_flag=True, help='Write an interactive web map')
@click.pass_context
def point_pattern(ctx, source, points_layer, window_layer, epsg, sigmas, functions,
                  nsim, nrank, seed, workers, output_dir, interactive):
    """Density and distance-function analysis of a point layer in SOURCE."""
    from geo_explore.pipelines import run_point_pattern

    try:
        config = _load_config(ctx.obj['config_file'], {
            'point_pattern.points_layer': points_layer,
            'point_pattern.window_layer': window_layer,
            'point_pattern.target_epsg': epsg,
            'point_pattern.density.sigmas': list(sigmas) or None,
            'point_pattern.envelope.functions': [f.upper() for f in functions] or None,
            'point_pattern.envelope.nsim': nsim,
            'point_pattern.envelope.nsim_l': nsim,
            'point_pattern.envelope.nrank': nrank,
            'point_pattern.envelope.seed': seed,
            'point_pattern.envelope.n_workers': workers,
            'paths.output_dir': output_dir,
            'plotting.mode': 'interactive' if interactive else None,
        })
        setup_logging(config, log_level='DEBUG' if ctx.obj['verbose'] else None)

        context = run_point_pattern(source, config)
    except USER_ERRORS as e:
        _fail(e)

    summary = context.get('pattern').summary()
    click.echo(f"✅ {summary['n_inside']} points inside, {summary['n_illegal']} illegal, "
               f"intensity {summary['intensity']:.4g}")
    for name, result in context.get('envelopes', {}).items():
        outside = int(result.outside_envelope().sum())
        click.echo(f"   {name}: observed outside envelope at {outside}/{len(result.r)} radii")
    for path in context.outputs.values():
        click.echo(f"   wrote {path}")


@cli.command('time-series')
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.option('--date-column', help='Name of the date column')
@click.option('--date-format', help='strptime format of the date column')
@click.option('--value-column', help='Name of the measurement column')
@click.option('--key-column', help='Grouping key column')
@click.option('--granularity', type=click.Choice(['day', 'week', 'month', 'year'],
                                                 case_sensitive=False))
@click.option('--func', 'aggregate_func', help='Aggregation: mean, sum, median, min, max')
@click.option('--start', help="Range start: YYYY, YYYY-MM, YYYY-MM-DD or '.'")
@click.option('--end', help="Range end: YYYY, YYYY-MM, YYYY-MM-DD or '.'")
@click.option('--before', type=int, help='Rolling window: preceding positions')
@click.option('--after', type=int, help='Rolling window: following positions')
@click.option('--max-lag', type=int, help='Largest autocorrelation lag')
@click.option('--seasonal-window', help="'periodic' or an odd integer")
@click.option('--period', type=int, help='Observations per seasonal cycle')
@click.option('--no-decompose', is_flag=True, help='Skip the STL decomposition')
@click.option('--output-dir', type=click.Path(file_okay=False), help='Directory for figures')
@click.pass_context
def time_series(ctx, source, date_column, date_format, value_column, key_column, granularity,
                aggregate_func, start, end, before, after, max_lag, seasonal_window, period,
                no_decompose, output_dir):
    """Aggregate, smooth and decompose the measurements in SOURCE."""
    from geo_explore.pipelines import run_time_series

    try:
        config = _load_config(ctx.obj['config_file'], {
            'time_series.date_column': date_column,
            'time_series.date_format': date_format,
            'time_series.value_column': value_column,
            'time_series.key_column': key_column,
            'time_series.granularity': granularity,
            'time_series.aggregate_func': aggregate_func,
            'time_series.range.start': start,
            'time_series.range.end': end,
            'time_series.rolling.before': before,
            'time_series.rolling.after': after,
            'time_series.autocorrelation.max_lag': max_lag,
            'time_series.decomposition.seasonal_window': seasonal_window,
            'time_series.decomposition.period': period,
            'paths.output_dir': output_dir,
        })
        setup_logging(config, log_level='DEBUG' if ctx.obj['verbose'] else None)

        context = run_time_series(source, config, decompose=not no_decompose)
    except USER_ERRORS as e:
        _fail(e)

    series = context.get('series')
    click.echo(f"✅ {len(series)} {config.get('time_series.granularity')} buckets "
               f"from {series.index.min()} to {series.index.max()}")
    result = context.get('decomposition')
    if result is not None:
        click.echo(f"   seasonal strength {result.seasonal_strength:.2f}, "
                   f"trend strength {result.trend_strength:.2f}")
    for path in context.outputs.values():
        click.echo(f"   wrote {path}")


if __name__ == '__main__':
    cli()
