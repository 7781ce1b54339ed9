"""Exception hierarchy for tristate."""

from __future__ import annotations


class TristateError(Exception):
    """Base class for tristate specific errors."""


class InvalidExpectedValueError(TristateError, TypeError):
    """Raised when a matcher is constructed with an unsupported expected value."""


class NoCurrentTestError(TristateError, RuntimeError):
    """Raised when an expectation is evaluated outside of a running test."""


class ExpectationFailedError(TristateError, AssertionError):
    """Raised by :func:`tristate.expect.assert_that` when a match fails."""

    def __init__(self, message: str, user_error: str = "") -> None:
        full = f"{message}\n{user_error}" if user_error else message
        super().__init__(full)
        self.generated_error = message
        self.user_error = user_error


__all__ = [
    "ExpectationFailedError",
    "InvalidExpectedValueError",
    "NoCurrentTestError",
    "TristateError",
]
