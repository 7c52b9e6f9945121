"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    LOGIN_COUNTER,
    NOTIFICATION_FAILURES,
    NOTIFICATIONS_CREATED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    increment_login,
    observe_request,
    record_notification_failure,
    record_notifications,
)

__all__ = [
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "NOTIFICATION_FAILURES",
    "NOTIFICATIONS_CREATED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "increment_login",
    "observe_request",
    "record_notification_failure",
    "record_notifications",
]
