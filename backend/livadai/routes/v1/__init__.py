# backend/livadai/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import bookings, config, experiences, host

__all__ = ["bookings", "config", "experiences", "host"]
