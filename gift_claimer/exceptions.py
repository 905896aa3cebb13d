class ClaimerError(Exception):
    """Base error for the gift claimer."""


class ConfigLoadError(ClaimerError):
    """Configuration could not be read or failed validation."""


class ScheduleRuleInvalid(ClaimerError):
    """A recurrence rule could not be parsed into a cron trigger."""

    def __init__(self, rule: str, reason: str):
        self.rule = rule
        self.reason = reason
        super().__init__(f"Invalid schedule rule {rule!r}: {reason}")
