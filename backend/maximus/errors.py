"""Domain errors, each carrying the HTTP status it maps to."""

from __future__ import annotations


class MaximusError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(MaximusError):
    """Raised when a negative or non-integer amount is added to a ledger."""


class InvalidAction(MaximusError):
    """Raised for unknown colours, brush sizes or coding blocks."""


class SessionBusy(MaximusError):
    """A submission arrived while the module was not accepting input."""

    status_code = 409


class SessionClosed(MaximusError):
    status_code = 409


class ChallengeUnavailable(MaximusError):
    """Content generation failed; the module is blocked until a retry."""

    status_code = 409


class NotFound(MaximusError):
    status_code = 404


class OracleError(Exception):
    """The difficulty oracle could not produce a valid answer.

    Never surfaces over HTTP: round sessions catch it and fall back.
    """
