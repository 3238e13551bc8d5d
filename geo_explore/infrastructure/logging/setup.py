"""Setup and configuration for the structured logging system."""

import logging
import sys
from pathlib import Path
from typing import Optional

from .structured_logger import get_logger, run_context
from .handlers import ConsoleHandler, FileHandler


def _reset_root(level: int) -> logging.Logger:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    return root_logger


def setup_logging(config,
                  run_id: Optional[str] = None,
                  log_file: Optional[str] = None,
                  console: Optional[bool] = None,
                  log_level: Optional[str] = None):
    """Configure console and rotating JSON file logging.

    Args:
        config: Config instance (``get`` with dot notation)
        run_id: Optional run identifier for context
        log_file: Log file path (defaults to ``paths.logs_dir``/``logging.log_file``)
        console: Enable console output (defaults to ``logging.console``)
        log_level: Minimum console level (defaults to ``logging.level``)
    """
    log_level = log_level or config.get('logging.level', 'INFO')
    level = getattr(logging, log_level.upper(), logging.INFO)
    if console is None:
        console = config.get('logging.console', True)

    root_logger = _reset_root(logging.DEBUG)

    if console:
        console_handler = ConsoleHandler(use_colors=sys.stderr.isatty(), show_context=True)
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    if log_file is None and config.get('logging.file', True):
        log_dir = Path(config.get('paths.logs_dir', 'logs'))
        log_file = log_dir / config.get('logging.log_file', 'geo_explore.log')

    if log_file is not None:
        file_handler = FileHandler(
            filename=str(log_file),
            max_bytes=config.get('logging.max_file_size', 10 * 1024 * 1024),
            backup_count=config.get('logging.backup_count', 3),
            use_json=True
        )
        root_logger.addHandler(file_handler)

    if run_id:
        run_context.set(run_id)

    get_logger(__name__).info(
        "Structured logging system initialized",
        extra={'context': {
            'log_level': log_level,
            'handlers': {'console': bool(console), 'file': str(log_file) if log_file else None}
        }}
    )


def setup_simple_logging(log_level: str = 'INFO'):
    """Console-only logging for tests and interactive use."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = _reset_root(level)

    console_handler = ConsoleHandler(show_context=True)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)
