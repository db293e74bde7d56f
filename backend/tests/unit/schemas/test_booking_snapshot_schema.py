from datetime import datetime, timedelta, timezone

from pydantic import ValidationError
import pytest

from livadai.core.metrics import REGISTRY
from livadai.models.booking import BookingStatus
from livadai.models.experience import ActivityType
from livadai.schemas.booking import BookingSnapshot, ExperienceSnapshot, coerce_id, parse_instant


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-06-01T10:00:00Z", datetime(2024, 6, 1, 10, tzinfo=timezone.utc)),
        ("2024-06-01T12:00:00+02:00", datetime(2024, 6, 1, 10, tzinfo=timezone.utc)),
        ("2024-06-01T10:00:00", datetime(2024, 6, 1, 10, tzinfo=timezone.utc)),
        (1717236000000, datetime(2024, 6, 1, 10, tzinfo=timezone.utc)),
        (datetime(2024, 6, 1, 10), datetime(2024, 6, 1, 10, tzinfo=timezone.utc)),
        (
            "2024-06-01T10:00:00.5Z",
            datetime(2024, 6, 1, 10, 0, 0, 500000, tzinfo=timezone.utc),
        ),
        (
            "2024-06-01T10:00:00.1234Z",
            datetime(2024, 6, 1, 10, 0, 0, 123400, tzinfo=timezone.utc),
        ),
    ],
)
def test_parse_instant_accepts_api_shapes(value, expected):
    parsed = parse_instant(value)
    assert parsed == expected
    assert parsed.tzinfo is not None


@pytest.mark.parametrize(
    "value", [None, "", "   ", "tomorrow", True, [], {"$date": 1}, float("inf")]
)
def test_parse_instant_rejects_garbage(value):
    assert parse_instant(value) is None


def test_offset_is_preserved_not_converted():
    parsed = parse_instant("2024-06-01T12:00:00+02:00")
    assert parsed.utcoffset() == timedelta(hours=2)


def test_coerce_id():
    assert coerce_id("abc") == "abc"
    assert coerce_id({"_id": "abc", "name": "Ana"}) == "abc"
    assert coerce_id({"id": "xyz"}) == "xyz"
    assert coerce_id("  ") is None
    assert coerce_id(12) is None


def test_booking_snapshot_normalizes_api_payload():
    booking = BookingSnapshot.model_validate(
        {
            "_id": "b1",
            "status": " paid ",
            "quantity": 3,
            "explorer": {"_id": "u1", "name": "Mihai"},
            "createdAt": "2024-05-20T08:00:00Z",
            "experience": {
                "_id": "e1",
                "title": "Sunrise hike",
                "host": "h1",
                "activityType": "group",
                "maxParticipants": 10,
                "startDate": "2024-06-01T05:00:00Z",
                "endDate": "2024-06-01T09:00:00Z",
                "unexpected": "ignored",
            },
        }
    )

    assert booking.id == "b1"
    assert booking.status == "paid"
    assert booking.parsed_status is BookingStatus.PAID
    assert booking.quantity == 3
    assert booking.explorer_id == "u1"
    assert booking.effective_host_id == "h1"
    assert booking.experience_key == "e1"
    assert booking.experience.activity_type is ActivityType.GROUP
    assert booking.experience.is_group
    assert booking.experience.ends_at == datetime(2024, 6, 1, 9, tzinfo=timezone.utc)


@pytest.mark.parametrize("explorer_key", ["explorer", "explorerId", "user"])
def test_explorer_id_aliases(explorer_key):
    booking = BookingSnapshot.model_validate({explorer_key: "u9", "status": "PAID"})
    assert booking.explorer_id == "u9"


def test_experience_given_as_bare_id():
    booking = BookingSnapshot.model_validate({"status": "PAID", "experience": "e7"})
    assert booking.experience_key == "e7"
    assert booking.experience.starts_at is None


def test_malformed_fields_become_missing():
    booking = BookingSnapshot.model_validate(
        {
            "status": 7,
            "quantity": "lots",
            "experience": {
                "startsAt": "not a date",
                "durationMinutes": "long",
                "activityType": "TEAM",
            },
            "date": "yesterday",
        }
    )

    assert booking.status == ""
    assert booking.parsed_status is None
    assert booking.quantity == 1
    assert booking.date is None
    assert booking.experience.starts_at is None
    assert booking.experience.duration_minutes is None
    assert booking.experience.activity_type is None


def test_snake_case_fields_are_accepted():
    start = datetime(2024, 6, 1, 10, tzinfo=timezone.utc)
    experience = ExperienceSnapshot(
        id="e1", starts_at=start, duration_minutes=30, max_participants=4
    )
    booking = BookingSnapshot(id="b1", status="PAID", experience=experience, explorer_id="u1")

    assert booking.experience.starts_at == start
    assert booking.experience.max_participants == 4
    assert booking.explorer_id == "u1"


def test_snapshots_are_frozen():
    booking = BookingSnapshot.model_validate({"status": "PAID"})
    with pytest.raises(ValidationError):
        booking.status = "CANCELLED"


def _dropped_durations() -> float:
    value = REGISTRY.get_sample_value(
        "livadai_snapshot_field_dropped_total", {"field": "duration_minutes"}
    )
    return value or 0.0


@pytest.mark.parametrize("duration", ["inf", "-inf", "nan", "NaN", float("inf"), 10**400])
def test_non_finite_duration_is_dropped(duration):
    before = _dropped_durations()

    experience = ExperienceSnapshot.model_validate({"_id": "e1", "durationMinutes": duration})

    assert experience.duration_minutes is None
    assert _dropped_durations() == before + 1


def test_finite_numeric_string_duration_is_kept():
    experience = ExperienceSnapshot.model_validate({"durationMinutes": " 90 "})
    assert experience.duration_minutes == 90
