from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

BODY_EXCERPT_LIMIT = 500


class FailureReason(enum.Enum):
    network_error = "network_error"
    timeout = "timeout"
    non_ok_status = "non_ok_status"
    body_read_error = "body_read_error"


def excerpt(body: str, limit: int = BODY_EXCERPT_LIMIT) -> str:
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


@dataclass(frozen=True)
class ClaimOutcome:
    """Result of a single claim attempt.

    ``reason`` is None on success. ``status_code`` is None when no response
    arrived (network error or timeout).
    """

    bundle_id: int
    status_code: Optional[int] = None
    body: str = ""
    reason: Optional[FailureReason] = None

    @classmethod
    def success(cls, bundle_id: int, status_code: int, body: str) -> "ClaimOutcome":
        return cls(bundle_id, status_code, excerpt(body))

    @classmethod
    def failure(
        cls,
        bundle_id: int,
        reason: FailureReason,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> "ClaimOutcome":
        return cls(bundle_id, status_code, excerpt(body), reason)

    @property
    def is_success(self) -> bool:
        return self.reason is None

    @property
    def is_failure(self) -> bool:
        return self.reason is not None

    def describe(self) -> str:
        if self.is_success:
            return f"success ({self.status_code})"
        if self.reason is FailureReason.non_ok_status:
            return f"{self.reason.value} ({self.status_code})"
        return self.reason.value
