"""Domain error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class InsightPulseError(Exception):
    """Base class for all domain errors raised by the service layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(InsightPulseError):
    """The insight or reaction addressed by the caller does not exist."""


class InvalidArgumentError(InsightPulseError):
    """A required field is missing or a value is outside its closed set."""


class ConflictError(InsightPulseError):
    """A reaction already exists for the (insight, actor) pair.

    Raised by the reaction store on a uniqueness violation and consumed by the
    toggle service as control flow. Never surfaced to HTTP callers.
    """


class UnavailableError(InsightPulseError):
    """The backing store failed or timed out.

    The outcome of the interrupted operation is unknown; callers should
    re-read the current reaction state before retrying.
    """
