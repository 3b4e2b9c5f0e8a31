"""Shared enumerations used across the backend."""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable codes attached to error payloads sent to clients."""

    INVALID_PAYLOAD = "invalid_payload"
    JOIN_REQUIRED = "join_required"
    SESSION_NOT_FOUND = "session_not_found"
    VALIDATION_FAILED = "validation_failed"
    MISSING_EXOGENOUS_DATA = "missing_exogenous_data"
