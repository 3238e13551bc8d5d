"""Human-readable formatter for console output."""

import logging
from datetime import datetime
from typing import Dict


class HumanFormatter(logging.Formatter):
    """Format log records for the console with colours and run context."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[0m',        # Default
        'WARNING': '\033[93m',    # Yellow
        'ERROR': '\033[91m',      # Red
        'CRITICAL': '\033[95m',   # Magenta
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    def __init__(self, use_colors: bool = True, show_context: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_context = show_context

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')

        if self.use_colors:
            level_color = self.COLORS.get(record.levelname, '')
            reset, bold, dim = self.RESET, self.BOLD, self.DIM
        else:
            level_color = reset = bold = dim = ''

        parts = [
            f"{dim}{timestamp}{reset}",
            f"{level_color}{record.levelname:8}{reset}",
            f"{dim}[{self._shorten_logger_name(record.name)}]{reset}",
        ]

        context_str = self._format_context(record) if self.show_context else ''
        if context_str:
            parts.append(f"{bold}{context_str}{reset}")

        parts.append(record.getMessage())
        output = ' '.join(parts)

        performance = getattr(record, 'performance', None)
        if performance:
            perf_str = self._format_performance(performance)
            if perf_str:
                output += f"\n  {dim}Performance: {perf_str}{reset}"

        tb = getattr(record, 'traceback', None)
        if tb:
            if self.use_colors:
                output += '\n' + '\n'.join(
                    f"  {level_color}{line}{reset}" for line in tb.strip().split('\n'))
            else:
                output += f"\n{tb}"

        return output

    def _format_context(self, record: logging.LogRecord) -> str:
        context = getattr(record, 'context', None)
        if not context:
            return ''

        parts = []
        if context.get('run_id'):
            parts.append(f"run:{str(context['run_id'])[:8]}")
        if context.get('pipeline'):
            parts.append(f"pipeline:{context['pipeline']}")
        if context.get('stage'):
            parts.append(f"stage:{context['stage']}")

        return f"[{' | '.join(parts)}]" if parts else ''

    def _shorten_logger_name(self, name: str, max_length: int = 24) -> str:
        if len(name) <= max_length:
            return name

        last = name.split('.')[-1]
        if len(last) <= max_length - 3:
            return f"...{last}"

        return f"{name[:max_length-3]}..."

    def _format_performance(self, perf: Dict) -> str:
        parts = []

        if 'duration_seconds' in perf:
            parts.append(f"{perf['duration_seconds']:.3f}s")

        if 'items_per_second' in perf:
            parts.append(f"{perf['items_per_second']:.1f} items/s")

        return ' | '.join(parts)
