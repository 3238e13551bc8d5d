"""Decorators for automatic logging and error capture."""

import functools
import inspect
import time
from typing import Callable, Any, Optional, TypeVar

from .structured_logger import get_logger

F = TypeVar('F', bound=Callable[..., Any])


def log_operation(operation_name: Optional[str] = None,
                  log_args: bool = False,
                  log_performance: bool = True):
    """Decorator to log operation execution and capture errors.

    Args:
        operation_name: Custom operation name (defaults to function name)
        log_args: Whether to log scalar function arguments
        log_performance: Whether to log the duration on success

    Example:
        @log_operation("kernel_density", log_args=True)
        def kernel_density(pattern, sigma):
            ...
    """
    def decorator(func: F) -> F:
        name = operation_name or func.__name__
        logger = get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start_time = time.time()
            context = {'operation': name}

            if log_args:
                bound_args = inspect.signature(func).bind(*args, **kwargs)
                bound_args.apply_defaults()
                arg_info = {}
                for arg_name, arg_value in bound_args.arguments.items():
                    if isinstance(arg_value, (str, int, float, bool)) or arg_value is None:
                        arg_info[arg_name] = arg_value
                    else:
                        arg_info[arg_name] = f"<{type(arg_value).__name__}>"
                context['arguments'] = arg_info

            try:
                logger.debug(f"Starting {name}", extra={'context': context})
                result = func(*args, **kwargs)

                if log_performance:
                    logger.log_performance(name, time.time() - start_time, status='success')
                return result

            except Exception as e:
                duration = time.time() - start_time
                logger.error(
                    f"Failed {name}: {str(e)}",
                    exc_info=True,
                    extra={
                        'context': context,
                        'performance': {
                            'duration': duration,
                            'status': 'failed',
                            'error_type': type(e).__name__
                        }
                    }
                )
                raise

        return wrapper  # type: ignore
    return decorator

