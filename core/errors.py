# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Typed errors shared by services and API
# PURPOSE: Stable, machine-checkable failure reasons
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ZombieWatchError, ValidationError, NotFoundError,
#          InvalidStateError, TransientProbeError, InternalError,
#          ServiceUnavailableError
# ============================================================================
"""
Error Taxonomy

Every failure the core can surface carries:
- reason: stable string the caller can branch on
- message: human-readable text (never empty)
- context: the offending field / entity, for logs and responses

The API layer maps reason -> HTTP status in one place (api/errors.py).
TransientProbeError is the exception: it is contained inside a single
candidate's assessment and never reaches the API.
"""

from typing import Any, Dict, Optional


class ZombieWatchError(Exception):
    """Base exception for all typed core failures."""

    reason: str = "internal_error"
    http_status: int = 500

    def __init__(self, message: str, **context: Any):
        if not message:
            message = self.reason.replace("_", " ").capitalize()
        self.message = message
        self.context: Dict[str, Any] = {
            k: v for k, v in context.items() if v is not None
        }
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the error body returned by the API."""
        body: Dict[str, Any] = {"error": self.reason, "message": self.message}
        if self.context:
            body["context"] = self.context
        return body


class ValidationError(ZombieWatchError):
    """Malformed or out-of-bound input. Always names the violated constraint."""

    reason = "validation_error"
    http_status = 400

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(message, field=field, value=value)


class NotFoundError(ZombieWatchError):
    """Referenced watcher or candidate set does not resolve for the owner."""

    reason = "not_found"
    http_status = 404

    def __init__(self, message: str, entity: Optional[str] = None, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message, entity=entity, entity_id=entity_id)


class InvalidStateError(ZombieWatchError):
    """Operation is not legal in the entity's current lifecycle state."""

    reason = "invalid_state"
    http_status = 409

    def __init__(
        self,
        message: str,
        current_state: Optional[str] = None,
        required_state: Optional[str] = None,
    ):
        self.current_state = current_state
        self.required_state = required_state
        super().__init__(
            message, current_state=current_state, required_state=required_state
        )


class TransientProbeError(ZombieWatchError):
    """Network-level failure probing one candidate. Contained, never escalated."""

    reason = "probe_failed"
    http_status = 502

    def __init__(self, message: str, url: Optional[str] = None, timed_out: bool = False):
        self.url = url
        self.timed_out = timed_out
        super().__init__(message, url=url)


class ServiceUnavailableError(ZombieWatchError):
    """A dependency of the request path has not been initialized yet."""

    reason = "service_unavailable"
    http_status = 503


class InternalError(ZombieWatchError):
    """Unexpected persistence or logic failure."""

    reason = "internal_error"
    http_status = 500


__all__ = [
    "ZombieWatchError",
    "ValidationError",
    "NotFoundError",
    "InvalidStateError",
    "TransientProbeError",
    "InternalError",
    "ServiceUnavailableError",
]
