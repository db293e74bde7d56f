from datetime import timedelta

from livadai.api.dependencies.services import get_eligibility_evaluator, get_window_policy
from livadai.core.exceptions import BusinessRuleException
from livadai.services.window_policy import WindowPolicy
from tests._utils.snapshots import (
    EXPLORER_ID,
    HOST_ID,
    NOW,
    booking_payload,
    ended_booking_payload,
    iso,
    parse_iso,
)

EXPLORER = {"role": "EXPLORER", "id": EXPLORER_ID}
HOST = {"role": "HOST", "id": HOST_ID}


def test_eligibility_for_explorer_inside_dispute_window(client):
    ended_at = NOW - timedelta(hours=1)
    response = client.post(
        "/api/v1/bookings/eligibility",
        json={"booking": ended_booking_payload("PAID", ended_at), "actor": EXPLORER},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["booking_id"] == "bk-1"
    assert body["status_bucket"] == "actionable"
    assert body["can_dispute"] is True
    assert body["can_chat"] is True
    assert body["can_cancel_by_host"] is False
    assert body["can_review"] is False
    assert parse_iso(body["evaluated_at"]) == NOW

    windows = body["windows"]
    assert windows["end_source"] == "explicit"
    assert parse_iso(windows["dispute"]["start"]) == ended_at + timedelta(minutes=15)
    assert parse_iso(windows["dispute"]["end"]) == ended_at + timedelta(hours=72)
    assert windows["review"]["end"] is None


def test_request_now_overrides_server_clock(client):
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/eligibility",
        json={"booking": booking, "actor": EXPLORER, "now": iso(NOW + timedelta(hours=100))},
    )

    assert response.status_code == 200
    assert response.json()["can_dispute"] is False


def test_eligibility_for_host(client):
    booking = ended_booking_payload("PENDING_ATTENDANCE", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/eligibility", json={"booking": booking, "actor": HOST}
    )

    body = response.json()
    assert body["can_confirm_attendance"] is True
    assert body["can_mark_no_show"] is True
    assert body["can_cancel_by_host"] is True
    assert body["can_dispute"] is False


def test_malformed_booking_dates_are_not_an_error(client):
    booking = booking_payload(
        "PAID", experience={"_id": "e1", "host": HOST_ID, "startsAt": "n/a", "endsAt": 12.5e99}
    )
    response = client.post(
        "/api/v1/bookings/eligibility", json={"booking": booking, "actor": HOST}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["can_confirm_attendance"] is False
    assert body["can_cancel_by_host"] is True
    assert body["windows"]["dispute"] is None


def test_batch_eligibility(client):
    bookings = [
        ended_booking_payload("PAID", NOW - timedelta(hours=1), booking_id="a"),
        ended_booking_payload("COMPLETED", NOW - timedelta(hours=80), booking_id="b"),
    ]
    response = client.post(
        "/api/v1/bookings/eligibility/batch", json={"bookings": bookings, "actor": EXPLORER}
    )

    assert response.status_code == 200
    results = response.json()["results"]
    assert [r["booking_id"] for r in results] == ["a", "b"]
    assert results[0]["can_dispute"] is True
    assert results[1]["can_review"] is True


def test_batch_requires_bookings(client):
    response = client.post(
        "/api/v1/bookings/eligibility/batch", json={"bookings": [], "actor": EXPLORER}
    )
    assert response.status_code == 422


def test_authorize_allowed_action(client):
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/authorize",
        json={"booking": booking, "actor": EXPLORER, "action": "dispute"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["permitted"] is True
    assert body["action"] == "dispute"


def test_authorize_rejects_expired_window(client):
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=73))
    response = client.post(
        "/api/v1/bookings/authorize",
        json={"booking": booking, "actor": EXPLORER, "action": "dispute"},
    )

    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "action_not_permitted"
    assert body["type"].endswith("/problems/action_not_permitted")
    assert body["status"] == 403
    assert body["title"] == "Forbidden"
    assert body["instance"] == "/api/v1/bookings/authorize"
    assert body["errors"]["action"] == "dispute"
    assert body["errors"]["booking_id"] == "bk-1"


def test_authorize_rejects_explorer_acting_as_host(client):
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/authorize",
        json={"booking": booking, "actor": EXPLORER, "action": "cancel_by_host"},
    )
    assert response.status_code == 403


def test_authorize_reports_other_domain_errors_with_their_status(app, client):
    class _RejectingEvaluator:
        def assert_permitted(self, action, booking, now, role, actor_id):
            raise BusinessRuleException(
                "booking is locked", code="booking_locked", details={"booking_id": booking.id}
            )

    app.dependency_overrides[get_eligibility_evaluator] = lambda: _RejectingEvaluator()
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/authorize",
        json={"booking": booking, "actor": EXPLORER, "action": "dispute"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "booking_locked"
    assert body["detail"] == "booking is locked"
    assert body["errors"] == {"booking_id": "bk-1"}


def test_validation_errors_use_problem_envelope(client):
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/eligibility",
        json={"booking": booking, "actor": {"role": "ADMIN", "id": "x"}},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "validation_error"
    assert "actor.role" in [error["field"] for error in body["errors"]]


def test_unknown_request_fields_are_rejected(client):
    booking = ended_booking_payload("PAID", NOW - timedelta(hours=1))
    response = client.post(
        "/api/v1/bookings/eligibility",
        json={"booking": booking, "actor": EXPLORER, "debug": True},
    )
    assert response.status_code == 422


def test_partition(client):
    bookings = [
        ended_booking_payload("PAID", NOW - timedelta(hours=1), booking_id="a"),
        ended_booking_payload("CANCELLED", NOW + timedelta(days=3), booking_id="b"),
        ended_booking_payload("COMPLETED", NOW - timedelta(hours=12), booking_id="c"),
        ended_booking_payload("COMPLETED", NOW - timedelta(hours=49), booking_id="d"),
    ]
    response = client.post("/api/v1/bookings/partition", json={"bookings": bookings})

    assert response.status_code == 200
    body = response.json()
    assert body["upcoming"] == ["a", "c"]
    assert body["history"] == ["b", "d"]


def test_window_policy_endpoint_reflects_overrides(app, client):
    app.dependency_overrides[get_window_policy] = lambda: WindowPolicy(
        dispute_closes_after_hours=96
    )
    response = client.get("/api/v1/config/windows")

    assert response.status_code == 200
    body = response.json()
    assert body["dispute_closes_after_hours"] == 96
    assert body["review_opens_after_hours"] == 48
