"""Structured logging infrastructure for pipeline runs."""

from .structured_logger import StructuredLogger, get_logger
from .context import LoggingContext, run_context, pipeline_context, stage_context
from .decorators import log_operation
from .setup import setup_logging, setup_simple_logging

__all__ = [
    'StructuredLogger',
    'get_logger',
    'LoggingContext',
    'run_context',
    'pipeline_context',
    'stage_context',
    'log_operation',
    'setup_logging',
    'setup_simple_logging',
]
