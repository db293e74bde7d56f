from .services import get_eligibility_evaluator, get_now, get_window_policy

__all__ = ["get_eligibility_evaluator", "get_now", "get_window_policy"]
