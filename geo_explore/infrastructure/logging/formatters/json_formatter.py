"""JSON formatter for machine-readable log files."""

import json
import logging
import traceback
from datetime import datetime


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON with context and metadata."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'process': record.process
        }

        context = getattr(record, 'context', None)
        if context:
            log_data['context'] = context

        performance = getattr(record, 'performance', None)
        if performance:
            log_data['performance'] = performance

        tb = getattr(record, 'traceback', None)
        if tb:
            log_data['traceback'] = tb
        elif record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        return json.dumps(log_data, separators=(',', ':'), default=str)

    def formatException(self, exc_info) -> str:
        return ''.join(traceback.format_exception(*exc_info))
