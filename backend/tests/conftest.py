"""Shared fixtures: a pinned clock and snapshot builders."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Optional

import pytest

from livadai.schemas.booking import BookingSnapshot, ExperienceSnapshot
from tests._utils.snapshots import NOW, booking_payload, experience_payload


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_experience() -> Callable[..., ExperienceSnapshot]:
    def _make(**kwargs: Any) -> ExperienceSnapshot:
        return ExperienceSnapshot.model_validate(experience_payload(**kwargs))

    return _make


@pytest.fixture
def make_booking() -> Callable[..., BookingSnapshot]:
    """Build a booking whose two-hour experience ended ``ended_ago`` before NOW."""

    def _make(
        status: str = "PAID",
        *,
        ended_ago: Optional[timedelta] = timedelta(hours=1),
        experience: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> BookingSnapshot:
        if experience is None:
            if ended_ago is None:
                experience = experience_payload()
            else:
                ends_at = NOW - ended_ago
                experience = experience_payload(
                    starts_at=ends_at - timedelta(hours=2), ends_at=ends_at
                )
        return BookingSnapshot.model_validate(
            booking_payload(status, experience=experience, **kwargs)
        )

    return _make
