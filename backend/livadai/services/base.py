# backend/livadai/services/base.py
"""
Shared base for the rule services.

A service carries the window policy its rules read, a per-class logger and
the latency histogram hook used by ``measure_operation``.
"""

from functools import wraps
import logging
import time
from typing import Any, Callable, Optional, TypeVar, cast

from ..core.metrics import SERVICE_OPERATION_SECONDS
from .window_policy import DEFAULT_WINDOW_POLICY, WindowPolicy

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for the rule services.

    Services hold no per-request state; the only thing they keep is the
    window policy, so a single instance can serve concurrent requests.
    """

    def __init__(self, policy: Optional[WindowPolicy] = None):
        self.policy = policy or DEFAULT_WINDOW_POLICY
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Time a service method into the operation latency histogram.

        Usage:
            @BaseService.measure_operation("evaluate")
            def evaluate(self, booking, now, ...):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                start_time = time.perf_counter()
                status = "error"
                try:
                    result = func(self, *args, **kwargs)
                    status = "success"
                    return result
                finally:
                    elapsed = time.perf_counter() - start_time
                    SERVICE_OPERATION_SECONDS.labels(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        status=status,
                    ).observe(elapsed)
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            "Slow operation detected: %s took %.2fs", operation_name, elapsed
                        )

            return cast(F, wrapper)

        return decorator
