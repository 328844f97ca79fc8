import functools
import logging
import time
from typing import Optional

_HANDLER: Optional[logging.Handler] = None


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """Attach a single stream handler to the root logger and set its level.

    Engine modules log through ``logging.getLogger(__name__)``; tools call
    this once to make those records visible. Repeated calls only adjust the
    level.
    """

    global _HANDLER
    root = logging.getLogger()
    root.setLevel(level)

    if _HANDLER is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[cover] %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
        _HANDLER = handler

    _HANDLER.setLevel(level)
    return root


def log_calls(func):
    """Method decorator logging calls, results and execution time at DEBUG level."""
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not logger.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)

        logger.debug("Call %s args=%r kwargs=%r", func.__qualname__, args[1:], kwargs)
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time
        logger.debug("Return %s: %r (%.6f s)", func.__qualname__, result, elapsed)
        return result

    return wrapper
