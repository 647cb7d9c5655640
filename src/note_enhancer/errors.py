"""Failure kinds raised by the enhancement pipeline.

Knowledge lookups never raise; everything else that can go wrong for a caller
maps to one of the classes below, each carrying a machine-readable ``kind``.
"""

from __future__ import annotations


class EnhancementError(Exception):
    """Base class for failures surfaced to the caller."""

    kind = "ENHANCEMENT_FAILED"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message, "code": self.kind}


class ConfigurationError(EnhancementError, ValueError):
    """A required credential or setting is missing."""

    kind = "CONFIGURATION_ERROR"


class InvalidInputError(EnhancementError, ValueError):
    """The request itself is unusable (empty text, bad tone, bad audio)."""

    kind = "INVALID_INPUT"


class UpstreamServiceError(EnhancementError):
    """The speech-to-text or generative collaborator failed."""

    kind = "UPSTREAM_ERROR"

    def __init__(self, service: str, action: str, detail: str):
        super().__init__(f"Failed to {action}: {detail}")
        self.service = service
        self.detail = detail


class QuotaExceededError(EnhancementError):
    """Caller has used up the monthly allowance."""

    kind = "LIMIT_REACHED"

    def __init__(self, limit: int, used: int):
        super().__init__("Monthly recording limit reached")
        self.limit = limit
        self.used = used

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload.update(limit=self.limit, used=self.used)
        return payload
