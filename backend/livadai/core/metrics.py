"""Prometheus counters for the booking rule evaluations."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

REGISTRY = CollectorRegistry(auto_describe=True)

# Eligibility evaluations grouped by the actor role that asked.
ELIGIBILITY_EVALUATIONS_TOTAL = Counter(
    "livadai_eligibility_evaluations_total",
    "Booking eligibility evaluations",
    ["role"],
    registry=REGISTRY,
)

# Evaluations that hit an unexpected error and were answered with all-false flags.
ELIGIBILITY_ERRORS_TOTAL = Counter(
    "livadai_eligibility_errors_total",
    "Booking eligibility evaluations that failed and defaulted to not eligible",
    ["reason"],
    registry=REGISTRY,
)

# Server-side re-validation outcomes per action.
ACTION_AUTHORIZATIONS_TOTAL = Counter(
    "livadai_action_authorizations_total",
    "Booking action re-validation outcomes",
    ["action", "outcome"],
    registry=REGISTRY,
)

# Snapshot fields that could not be parsed and were read as missing.
SNAPSHOT_FIELD_DROPPED_TOTAL = Counter(
    "livadai_snapshot_field_dropped_total",
    "Snapshot fields discarded because they could not be parsed",
    ["field"],
    registry=REGISTRY,
)

# Booking statuses that did not match any known state.
UNKNOWN_STATUS_TOTAL = Counter(
    "livadai_unknown_booking_status_total",
    "Booking status values outside the known lifecycle",
    registry=REGISTRY,
)

# Service operation latency, recorded by BaseService.measure_operation.
SERVICE_OPERATION_SECONDS = Histogram(
    "livadai_service_operation_seconds",
    "Service operation duration in seconds",
    ["service", "operation", "status"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
    registry=REGISTRY,
)
