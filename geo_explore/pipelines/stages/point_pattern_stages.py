# geo_explore/pipelines/stages/point_pattern_stages.py
"""Stages of the spatial point pattern pipeline."""

from pathlib import Path
from typing import List, Optional, Union

from geo_explore.infrastructure.logging import get_logger
from geo_explore.spatial import (
    build_point_pattern, default_r, density_series, envelope, load_point_layers,
)
from geo_explore.visualization import SpatialPlotter, save_figure
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)


class LoadLayersStage(PipelineStage):
    """Read the observation and boundary layers and reproject both."""

    output_key = 'layers'

    def __init__(self, source: Union[str, Path]):
        super().__init__()
        self.source = Path(source)

    @property
    def name(self) -> str:
        return "load_layers"

    def execute(self, context) -> StageResult:
        settings = context.config.point_pattern
        points, window = load_point_layers(
            self.source,
            points_layer=settings['points_layer'],
            window_layer=settings['window_layer'],
            epsg=settings['target_epsg'],
            assume_crs=settings.get('assume_epsg'),
        )
        context.set(self.output_key, (points, window))
        return StageResult(
            success=True,
            metrics={'n_points': len(points), 'n_window_features': len(window),
                     'crs': points.crs.to_string()},
        )


class BuildPatternStage(PipelineStage):
    """Pair the observations with the dissolved study window."""

    output_key = 'pattern'

    @property
    def name(self) -> str:
        return "build_pattern"

    @property
    def requires(self) -> List[str]:
        return ['layers']

    def execute(self, context) -> StageResult:
        points, window = context.get('layers')
        pattern = build_point_pattern(
            points, window, mark_columns=context.config.get('point_pattern.mark_columns'))
        context.set(self.output_key, pattern)

        warnings = []
        if pattern.n_illegal:
            warnings.append(f"{pattern.n_illegal} illegal points outside the window")
        return StageResult(success=True, metrics=pattern.summary(), warnings=warnings)


class DensityStage(PipelineStage):
    """Kernel density surfaces for each configured bandwidth."""

    output_key = 'densities'

    def __init__(self, sigmas: Optional[List[float]] = None):
        super().__init__()
        self.sigmas = sigmas

    @property
    def name(self) -> str:
        return "density"

    @property
    def requires(self) -> List[str]:
        return ['pattern']

    def execute(self, context) -> StageResult:
        settings = context.config.get('point_pattern.density', {})
        sigmas = self.sigmas or settings.get('sigmas', [])
        surfaces = density_series(context.get('pattern'), sigmas,
                                  dimyx=settings.get('dimyx', 128))
        context.set(self.output_key, surfaces)
        return StageResult(
            success=True,
            metrics={f'peak_sigma_{sigma:g}': float(surface.max())
                     for sigma, surface in surfaces.items()},
        )


class EnvelopeStage(PipelineStage):
    """Summary functions with CSR simulation envelopes."""

    output_key = 'envelopes'

    @property
    def name(self) -> str:
        return "envelope"

    @property
    def requires(self) -> List[str]:
        return ['pattern']

    def execute(self, context) -> StageResult:
        settings = context.config.get('point_pattern.envelope', {})
        pattern = context.get('pattern')
        r = default_r(pattern.window, settings.get('n_r', 128))

        results = {}
        metrics = {}
        for function in settings.get('functions', ['G']):
            function = str(function).upper()
            nsim = settings.get('nsim', 99)
            if function == 'L' and settings.get('nsim_l'):
                nsim = settings['nsim_l']
            result = envelope(
                pattern, r=r, function=function, nsim=nsim,
                nrank=settings.get('nrank', 1), seed=settings.get('seed'),
                n_workers=settings.get('n_workers', 1),
            )
            results[function] = result
            metrics[f'{function}_outside_envelope'] = int(result.outside_envelope().sum())

        context.set(self.output_key, results)
        return StageResult(success=True, metrics=metrics)


class PointPatternPlotStage(PipelineStage):
    """Render the pattern, its densities and envelopes."""

    output_key = 'figures'

    @property
    def name(self) -> str:
        return "plot_point_pattern"

    @property
    def requires(self) -> List[str]:
        return ['pattern']

    def execute(self, context) -> StageResult:
        plot_config = context.plot_config
        plotter = SpatialPlotter(plot_config)
        pattern = context.get('pattern')
        densities = context.get('densities', {})
        envelopes = context.get('envelopes', {})

        if plot_config.interactive:
            # Heat layer from the middle bandwidth
            sigmas = sorted(densities)
            surface = densities[sigmas[len(sigmas) // 2]] if sigmas else None
            figures = {'point_pattern_map': plotter.interactive_map(pattern, surface)}
        else:
            figures = {'point_pattern': plotter.plot_point_pattern(pattern)}
            for sigma, surface in densities.items():
                figures[f'density_sigma_{sigma:g}'] = plotter.plot_density(surface, pattern)
            for function, result in envelopes.items():
                figures[f'envelope_{function}'] = plotter.plot_envelope(result)

        if context.config.get('plotting.save', True) and plot_config.output_dir is not None:
            for figure_name, figure in figures.items():
                context.outputs[figure_name] = save_figure(figure, figure_name, plot_config)
        context.set(self.output_key, figures)
        return StageResult(success=True, metrics={'n_figures': len(figures)})
