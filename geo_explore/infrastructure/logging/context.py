"""Logging context management for pipeline runs."""

import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from .structured_logger import (
    run_context, pipeline_context, stage_context, get_logger
)


class LoggingContext:
    """Manages logging context throughout a pipeline run.

    Provides nested scopes for pipelines, stages and operations. The
    current scope is propagated to every record logged within it, and
    the duration and status of each scope are kept in ``timings``.
    """

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id or str(uuid.uuid4())
        self.node_stack: List[str] = []
        self.stage_stack: List[str] = []
        self.timings: Dict[str, Dict[str, Any]] = {}
        self.logger = get_logger(__name__)

    @contextmanager
    def pipeline(self, name: str, **metadata):
        """Context for a whole pipeline run.

        Example:
            with ctx.pipeline('point_pattern'):
                ...
        """
        run_token = run_context.set(self.run_id)
        pipeline_token = pipeline_context.set(name)
        self.node_stack.append(name)
        start_time = time.time()

        self.logger.info(
            f"Pipeline started: {name}",
            extra={'context': {'pipeline_name': name, **metadata}}
        )

        status = 'completed'
        try:
            yield self
        except Exception:
            status = 'failed'
            raise
        finally:
            duration = time.time() - start_time
            self.timings[name] = {
                'duration': duration,
                'status': status,
                'timestamp': datetime.now(timezone.utc).isoformat()
            }
            self.logger.log_performance(f"pipeline_{name}", duration, status=status)

            self.node_stack.pop()
            pipeline_context.reset(pipeline_token)
            run_context.reset(run_token)

    @contextmanager
    def stage(self, name: str, **metadata):
        """Context for one stage; failures are logged and re-raised."""
        stage_token = stage_context.set(name)
        self.stage_stack.append(name)
        parent = self.node_stack[-1] if self.node_stack else "unknown"
        node_id = f"{parent}/{name}"
        self.node_stack.append(node_id)
        start_time = time.time()

        self.logger.info(
            f"Stage started: {name}",
            extra={'context': {'stage_name': name, **metadata}}
        )

        status = 'completed'
        try:
            yield self
        except Exception as e:
            status = 'failed'
            self.logger.log_error_with_context(e, operation=f"stage_{name}")
            raise
        finally:
            duration = time.time() - start_time
            self.timings[node_id] = {
                'duration': duration,
                'status': status,
                'timestamp': datetime.now(timezone.utc).isoformat()
            }
            self.logger.log_performance(f"stage_{name}", duration, status=status)

            self.stage_stack.pop()
            self.node_stack.pop()
            stage_context.reset(stage_token)

    @contextmanager
    def operation(self, name: str, **metadata):
        """Context for an operation within a stage."""
        parent = self.node_stack[-1] if self.node_stack else "unknown"
        node_id = f"{parent}/{name}"
        self.node_stack.append(node_id)
        start_time = time.time()

        self.logger.debug(f"Operation started: {name}", extra={'context': metadata})

        status = 'success'
        try:
            yield self
        except Exception:
            status = 'failed'
            raise
        finally:
            duration = time.time() - start_time
            self.timings[node_id] = {'duration': duration, 'status': status}
            self.logger.log_performance(name, duration, status=status, **metadata)
            self.node_stack.pop()

    def get_timings(self) -> Dict[str, Dict[str, Any]]:
        """Get timing information for all finished scopes."""
        return self.timings.copy()

    @property
    def current_node(self) -> Optional[str]:
        return self.node_stack[-1] if self.node_stack else None

    @property
    def current_stage(self) -> Optional[str]:
        return self.stage_stack[-1] if self.stage_stack else None
