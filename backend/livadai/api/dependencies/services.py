# backend/livadai/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Rule services are stateless apart from the window policy, so one instance per
process is shared by every request.
"""

from datetime import datetime
from functools import lru_cache

from ...core.config import settings
from ...services.eligibility_service import EligibilityEvaluator
from ...services.window_policy import WindowPolicy
from ...utils.time_utils import utc_now


@lru_cache(maxsize=1)
def get_window_policy() -> WindowPolicy:
    return settings.window_policy()


@lru_cache(maxsize=1)
def get_eligibility_evaluator() -> EligibilityEvaluator:
    return EligibilityEvaluator(get_window_policy())


def get_now() -> datetime:
    """Request clock; overridden in tests to pin ``now``."""
    return utc_now()
