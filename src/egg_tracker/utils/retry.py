"""Retry helpers for transient storage errors."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, Optional, Tuple, Type, TypeVar, ParamSpec


P = ParamSpec("P")
R = TypeVar("R")

_logger = logging.getLogger(__name__)


def retry(
    *,
    attempts: int = 3,
    delay: float = 0.05,
    backoff: float = 2.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    retry_if: Optional[Callable[[BaseException], bool]] = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Re-invoke the wrapped call on ``exceptions``, sleeping with exponential backoff.

    The last error is re-raised once ``attempts`` calls have failed. When
    ``retry_if`` is given, errors it rejects are re-raised immediately.
    """

    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            current_delay = delay
            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    if attempt == attempts or (
                        retry_if is not None and not retry_if(exc)
                    ):
                        raise
                    _logger.debug(
                        "retrying_call",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt,
                            "error": str(exc),
                        },
                    )
                    time.sleep(current_delay)
                    current_delay *= backoff
            raise AssertionError("unreachable")  # pragma: no cover

        return wrapper

    return decorator
