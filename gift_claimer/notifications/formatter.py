from __future__ import annotations

SUCCESS_PREFIX = "STFC Automation Success"
FAILURE_PREFIX = "STFC Automation Error"
EMAIL_SUBJECT = "STFC Automation Notification"


def format_claim_message(label: str, is_failure: bool) -> str:
    """Render the one-line notification text for a claim outcome."""
    prefix = FAILURE_PREFIX if is_failure else SUCCESS_PREFIX
    return f"{prefix}: {label}"
