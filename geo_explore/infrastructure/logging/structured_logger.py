"""Structured logging with context propagation for pipeline runs."""

import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Any, Optional

# Context variables for correlating records within one run
run_context: ContextVar[Optional[str]] = ContextVar('run_id', default=None)
pipeline_context: ContextVar[Optional[str]] = ContextVar('pipeline', default=None)
stage_context: ContextVar[Optional[str]] = ContextVar('stage', default=None)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class StructuredLogger(logging.Logger):
    """Logger that attaches run context, performance data and tracebacks.

    Every record carries three extra attributes read by the formatters:
    ``context`` (dict), ``performance`` (dict or None) and ``traceback``
    (str or None).
    """

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, **kwargs):
        context = {
            'run_id': run_context.get(),
            'pipeline': pipeline_context.get(),
            'stage': stage_context.get(),
            'logger_name': self.name,
            'timestamp': _utc_now(),
        }
        context = {k: v for k, v in context.items() if v is not None}

        performance = None
        traceback_str = None
        if extra and isinstance(extra, dict):
            extra = dict(extra)
            performance = extra.pop('performance', None)
            context.update(extra.pop('context', {}) or {})
            traceback_str = extra.pop('traceback', None)

        if not traceback_str and exc_info:
            if isinstance(exc_info, BaseException):
                exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
            elif not isinstance(exc_info, tuple):
                exc_info = sys.exc_info()
            if exc_info[0] is not None:
                traceback_str = ''.join(traceback.format_exception(*exc_info))

        if extra is None:
            extra = {}
        extra.update({
            'context': context,
            'performance': performance,
            'traceback': traceback_str
        })

        super()._log(level, msg, args, exc_info=None, extra=extra,
                     stack_info=stack_info, **kwargs)

    def log_performance(self, operation: str, duration: float, **metrics):
        """Log performance metrics for an operation.

        Example:
            logger.log_performance('envelope_G', 4.2,
                                   items_processed=99)
        """
        performance_data = {
            'operation': operation,
            'duration_seconds': round(duration, 3),
            'timestamp': _utc_now(),
            **metrics
        }

        if 'items_processed' in metrics and duration > 0:
            performance_data['items_per_second'] = round(
                metrics['items_processed'] / duration, 2
            )

        self.info(
            f"Performance: {operation} completed in {duration:.3f}s",
            extra={'performance': performance_data}
        )

    def log_metrics(self, message: str, **metrics):
        """Log a summary of counts for the current stage."""
        self.info(message, extra={'context': {'metrics': metrics}})

    def log_error_with_context(self, error: Exception, operation: str = None, **context):
        """Log an error with its type, the operation and a traceback."""
        error_context = {
            'error_type': type(error).__name__,
            'error_module': type(error).__module__,
            **context
        }

        if operation:
            error_context['operation'] = operation

        self.error(
            f"{type(error).__name__}: {str(error)}",
            exc_info=error,
            extra={'context': error_context}
        )


_logger_cache: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger instance.

    Example:
        from geo_explore.infrastructure.logging import get_logger
        logger = get_logger(__name__)
    """
    if name in _logger_cache:
        return _logger_cache[name]

    original_class = logging.getLoggerClass()
    logging.setLoggerClass(StructuredLogger)

    try:
        logger = logging.getLogger(name)
        _logger_cache[name] = logger
        return logger
    finally:
        logging.setLoggerClass(original_class)
