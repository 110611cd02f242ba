"""Exception hierarchy for the automation core."""
from __future__ import annotations


class AutoApplyError(Exception):
    """Base class for every error raised by autoapply."""


class StorageError(AutoApplyError):
    """The key-value store could not be read or written."""


class ConfigConflict(StorageError):
    """The stored configuration changed since the caller loaded it."""

    def __init__(self, expected: int, found: int) -> None:
        super().__init__(
            f"configuration revision conflict: expected {expected}, store has {found}"
        )
        self.expected = expected
        self.found = found


class RecordNotFound(AutoApplyError):
    """No record/pattern with the given id exists in the section."""


class ReadinessTimeout(AutoApplyError):
    """The readiness anchor did not appear within the allowed attempts."""

    def __init__(self, selector: str, attempts: int) -> None:
        super().__init__(f"{selector!r} not found after {attempts} attempts")
        self.selector = selector
        self.attempts = attempts


class AutomationStopped(AutoApplyError):
    """A stop request arrived while waiting."""
