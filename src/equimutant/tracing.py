"""
Request tracing for the engine entry points.

Every traced call logs its input file on entry and its outcome and duration
on exit. Rejected requests (validation errors) are logged as warnings; any
other exception is logged as an error and re-raised unchanged.
"""

import time
import functools
from typing import Callable, Any
from equimutant.exceptions import InvalidArgumentError
from equimutant.logging_config import logger


def _subject(args: tuple, kwargs: dict) -> str:
    # Entry points are methods taking the input file first
    if "input_path" in kwargs:
        return str(kwargs["input_path"])
    return str(args[1]) if len(args) > 1 else "?"


def trace(func: Callable) -> Callable:
    """
    Decorator that logs a request's input, outcome and elapsed time.

    Usage:
        @trace
        def run_target(self, input_path, output_dir, target_lines, plugin_name=None):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        name = func.__qualname__
        subject = _subject(args, kwargs)
        logger.debug(f"TRACE_ENTER: {name}({subject})")
        start = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except InvalidArgumentError as e:
            logger.warning(f"TRACE_EXIT: {name}({subject}) rejected: {e}")
            raise
        except Exception as e:
            elapsed = time.perf_counter() - start
            logger.error(f"TRACE_EXIT: {name}({subject}) failed after {elapsed:.4f}s with {type(e).__name__}: {e}")
            raise

        elapsed = time.perf_counter() - start
        outcome = getattr(result, "outcome", None)
        status = outcome.value if outcome is not None else "done"
        logger.debug(f"TRACE_EXIT: {name}({subject}) {status} in {elapsed:.4f}s")
        return result

    return wrapper
