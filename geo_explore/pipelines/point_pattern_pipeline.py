# geo_explore/pipelines/point_pattern_pipeline.py
"""Spatial point pattern exploration: load, build, smooth, test, plot."""

from pathlib import Path
from typing import Dict, List, Optional, Union

from geo_explore.config import Config
from .context import PipelineContext
from .runner import run_pipeline
from .stages import (
    BuildPatternStage, DensityStage, EnvelopeStage, LoadLayersStage,
    PipelineStage, PointPatternPlotStage, StageResult,
)


def build_point_pattern_pipeline(source: Union[str, Path],
                                 plot: bool = True,
                                 sigmas: Optional[List[float]] = None) -> List[PipelineStage]:
    """Stages reading the point and boundary layers from ``source``."""
    stages = [
        LoadLayersStage(source),
        BuildPatternStage(),
        DensityStage(sigmas),
        EnvelopeStage(),
    ]
    if plot:
        stages.append(PointPatternPlotStage())
    return stages


def run_point_pattern(source: Union[str, Path],
                      config: Config,
                      plot: bool = True) -> PipelineContext:
    """Run the full point pattern pipeline and return its context."""
    context = PipelineContext(config=config)
    results: Dict[str, StageResult] = run_pipeline(
        build_point_pattern_pipeline(source, plot=plot), context, name='point_pattern')
    context.set('results', results)
    return context
