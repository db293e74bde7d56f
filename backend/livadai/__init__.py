"""LivadAI booking lifecycle and time-windowed eligibility rules."""

__version__ = "1.0.0"
