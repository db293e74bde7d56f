# backend/livadai/services/__init__.py
"""
Rule services for the LivadAI booking lifecycle.

Modules are imported directly (``from livadai.services.eligibility_service
import EligibilityEvaluator``) to keep configuration imports free of cycles.
"""
