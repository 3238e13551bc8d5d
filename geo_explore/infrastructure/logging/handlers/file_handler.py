"""File handler with rotation support."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ..formatters import JsonFormatter


class FileHandler(RotatingFileHandler):
    """Rotating file handler that creates its directory and writes JSON."""

    def __init__(self,
                 filename: str,
                 max_bytes: int = 10 * 1024 * 1024,
                 backup_count: int = 3,
                 encoding: str = 'utf-8',
                 use_json: bool = True):
        log_path = Path(filename)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            filename=str(log_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding=encoding
        )

        if use_json:
            self.setFormatter(JsonFormatter())
        else:
            self.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))

        self.setLevel(logging.DEBUG)
