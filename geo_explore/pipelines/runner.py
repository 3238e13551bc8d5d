# geo_explore/pipelines/runner.py
"""Run a linear sequence of stages."""

import time
from typing import Dict, Sequence

from geo_explore.exceptions import GeoExploreError
from geo_explore.infrastructure.logging import get_logger
from .context import PipelineContext
from .stages.base_stage import PipelineStage, StageResult, StageStatus

logger = get_logger(__name__)


def run_pipeline(stages: Sequence[PipelineStage],
                 context: PipelineContext,
                 name: str = 'pipeline') -> Dict[str, StageResult]:
    """
    Execute ``stages`` in order against a shared context.

    Each stage runs inside a logging stage scope. The first failing stage
    stops the run: it is marked FAILED, later stages are marked SKIPPED
    and its error is re-raised.

    Returns:
        StageResult per stage name
    """
    results: Dict[str, StageResult] = {}

    with context.logging_context.pipeline(name, stages=[s.name for s in stages]):
        for position, stage in enumerate(stages):
            valid, errors = stage.validate(context)
            if not valid:
                stage.status = StageStatus.FAILED
                stage.error = '; '.join(errors)
                _skip(stages[position + 1:])
                raise GeoExploreError(stage.error)

            stage.status = StageStatus.RUNNING
            start_time = time.time()
            try:
                with context.logging_context.stage(stage.name):
                    result = stage.execute(context)
            except Exception as e:
                stage.status = StageStatus.FAILED
                stage.error = str(e)
                _skip(stages[position + 1:])
                raise

            result.execution_time = time.time() - start_time
            stage.result = result
            results[stage.name] = result

            if not result.success:
                stage.status = StageStatus.FAILED
                stage.error = '; '.join(result.warnings) or 'stage reported failure'
                _skip(stages[position + 1:])
                raise GeoExploreError(f"Stage '{stage.name}' failed: {stage.error}")

            stage.status = StageStatus.COMPLETED
            for warning in result.warnings:
                logger.warning(f"{stage.name}: {warning}")

    return results


def _skip(stages: Sequence[PipelineStage]):
    for stage in stages:
        stage.status = StageStatus.SKIPPED
