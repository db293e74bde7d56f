from datetime import datetime, timedelta, timezone

import pytest

from livadai.schemas.booking import BookingSnapshot, ExperienceSnapshot
from livadai.services.window_calculator import (
    EndSource,
    TimeWindow,
    attendance_window,
    compute_booking_windows,
    dispute_window,
    effective_end,
    effective_start,
    resolve_schedule,
    review_window,
)
from livadai.services.window_policy import WindowPolicy

START = datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)


def _experience(**fields) -> ExperienceSnapshot:
    return ExperienceSnapshot.model_validate(fields)


def test_duration_resolves_end_and_attendance_window():
    exp = _experience(startsAt="2024-06-01T10:00:00Z", durationMinutes=90)
    schedule = resolve_schedule(exp)

    assert schedule.end == datetime(2024, 6, 1, 11, 30, tzinfo=timezone.utc)
    assert schedule.end_source is EndSource.DURATION

    window = attendance_window(schedule)
    assert window == TimeWindow(
        start=datetime(2024, 6, 1, 10, 15, tzinfo=timezone.utc),
        end=datetime(2024, 6, 3, 11, 30, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize("duration", [15, 90, 600, 0, -30, None])
def test_explicit_end_always_wins(duration):
    explicit = START + timedelta(hours=5)
    exp = _experience(startsAt=START, endsAt=explicit, durationMinutes=duration)

    schedule = resolve_schedule(exp)
    assert schedule.end == explicit
    assert schedule.end_source is EndSource.EXPLICIT


@pytest.mark.parametrize("duration", [None, 0, -45, "n/a"])
def test_day_fallback_without_positive_duration(duration):
    exp = _experience(startsAt=START, durationMinutes=duration)

    schedule = resolve_schedule(exp)
    assert schedule.end == START + timedelta(hours=24)
    assert schedule.end_source is EndSource.DAY_FALLBACK


def test_malformed_end_falls_back_to_duration():
    exp = _experience(startsAt=START, endsAt="next tuesday", durationMinutes=60)
    assert effective_end(exp) == START + timedelta(minutes=60)


def test_no_dates_means_every_window_is_unavailable():
    booking = BookingSnapshot.model_validate({"_id": "b1", "status": "PAID", "experience": {}})
    windows = compute_booking_windows(booking)

    assert windows.schedule.start is None
    assert windows.schedule.end is None
    assert windows.dispute is None
    assert windows.attendance is None
    assert windows.review is None
    assert windows.history_visible_from is None


def test_end_without_start_still_opens_dispute_but_not_attendance():
    exp = _experience(endsAt=START)
    schedule = resolve_schedule(exp)

    assert dispute_window(schedule) is not None
    assert attendance_window(schedule) is None


def test_legacy_booking_date_stands_in_for_start():
    booking = BookingSnapshot.model_validate(
        {"_id": "b1", "status": "PAID", "date": "2024-06-01T10:00:00Z", "experience": {}}
    )
    assert effective_start(booking.experience, booking.date) == START

    windows = compute_booking_windows(booking)
    assert windows.schedule.end == START + timedelta(hours=24)
    assert windows.attendance is not None
    assert windows.attendance.start == START + timedelta(minutes=15)


def test_alias_field_names_are_read():
    exp = _experience(startDate="2024-06-01T10:00:00Z", endDate="2024-06-01T12:00:00Z")
    schedule = resolve_schedule(exp)
    assert schedule.start == START
    assert schedule.end == START + timedelta(hours=2)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (timedelta(minutes=14, seconds=59), False),
        (timedelta(minutes=15), True),
        (timedelta(hours=72), True),
        (timedelta(hours=72, seconds=1), False),
    ],
)
def test_dispute_window_boundaries_are_closed(offset, expected):
    end = START + timedelta(hours=2)
    window = dispute_window(resolve_schedule(_experience(startsAt=START, endsAt=end)))
    assert window is not None
    assert window.contains(end + offset) is expected


def test_review_window_is_open_ended():
    end = START + timedelta(hours=2)
    window = review_window(resolve_schedule(_experience(startsAt=START, endsAt=end)))

    assert window is not None
    assert window.is_open_ended
    assert window.start == end + timedelta(hours=48)
    assert not window.contains(end + timedelta(hours=47, minutes=59))
    assert window.contains(end + timedelta(days=3650))


def test_custom_policy_moves_the_offsets():
    policy = WindowPolicy(dispute_closes_after_hours=96, single_day_fallback_hours=8)
    schedule = resolve_schedule(_experience(startsAt=START), policy=policy)

    assert schedule.end == START + timedelta(hours=8)
    window = dispute_window(schedule, policy)
    assert window is not None
    assert window.end == schedule.end + timedelta(hours=96)


def test_far_future_dates_do_not_overflow():
    exp = _experience(startsAt="9999-12-31T20:00:00Z")
    schedule = resolve_schedule(exp)

    # Start + 24h is past datetime.max, so there is no end and no window
    assert schedule.end is None
    assert dispute_window(schedule) is None
    assert review_window(schedule) is None


def test_windows_payload_uses_iso_strings():
    exp = {"startsAt": "2024-06-01T10:00:00Z", "durationMinutes": 90}
    booking = BookingSnapshot.model_validate({"_id": "b1", "status": "PAID", "experience": exp})

    payload = compute_booking_windows(booking).to_payload()
    assert payload["end_source"] == "duration"
    assert payload["effective_end"] == "2024-06-01T11:30:00+00:00"
    assert payload["review"]["end"] is None
