from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from ..core.constants import (
    ATTENDANCE_CLOSES_AFTER_HOURS,
    ATTENDANCE_OPENS_AFTER_MINUTES,
    DISPUTE_CLOSES_AFTER_HOURS,
    DISPUTE_OPENS_AFTER_MINUTES,
    HISTORY_VISIBLE_AFTER_HOURS,
    REVIEW_OPENS_AFTER_HOURS,
    SINGLE_DAY_FALLBACK_HOURS,
)


@dataclass(frozen=True)
class WindowPolicy:
    # Dispute window, anchored on the effective end
    dispute_opens_after_minutes: int = DISPUTE_OPENS_AFTER_MINUTES
    dispute_closes_after_hours: int = DISPUTE_CLOSES_AFTER_HOURS

    # Attendance window opens after the start and closes after the end
    attendance_opens_after_minutes: int = ATTENDANCE_OPENS_AFTER_MINUTES
    attendance_closes_after_hours: int = ATTENDANCE_CLOSES_AFTER_HOURS

    # Review window has no upper bound
    review_opens_after_hours: int = REVIEW_OPENS_AFTER_HOURS
    history_visible_after_hours: int = HISTORY_VISIBLE_AFTER_HOURS

    single_day_fallback_hours: int = SINGLE_DAY_FALLBACK_HOURS

    @property
    def dispute_opens_after(self) -> timedelta:
        return timedelta(minutes=self.dispute_opens_after_minutes)

    @property
    def dispute_closes_after(self) -> timedelta:
        return timedelta(hours=self.dispute_closes_after_hours)

    @property
    def attendance_opens_after(self) -> timedelta:
        return timedelta(minutes=self.attendance_opens_after_minutes)

    @property
    def attendance_closes_after(self) -> timedelta:
        return timedelta(hours=self.attendance_closes_after_hours)

    @property
    def review_opens_after(self) -> timedelta:
        return timedelta(hours=self.review_opens_after_hours)

    @property
    def history_visible_after(self) -> timedelta:
        return timedelta(hours=self.history_visible_after_hours)

    @property
    def single_day_fallback(self) -> timedelta:
        return timedelta(hours=self.single_day_fallback_hours)

    def to_payload(self) -> dict[str, Any]:
        return {
            "dispute_opens_after_minutes": self.dispute_opens_after_minutes,
            "dispute_closes_after_hours": self.dispute_closes_after_hours,
            "attendance_opens_after_minutes": self.attendance_opens_after_minutes,
            "attendance_closes_after_hours": self.attendance_closes_after_hours,
            "review_opens_after_hours": self.review_opens_after_hours,
            "history_visible_after_hours": self.history_visible_after_hours,
            "single_day_fallback_hours": self.single_day_fallback_hours,
        }


DEFAULT_WINDOW_POLICY: Final = WindowPolicy()
