"""Domain exceptions raised by the service layer.

Routers translate these into HTTP responses; nothing in the service layer
knows about status codes.
"""


class CaseTrackError(Exception):
    """Base class for service-level errors."""


class NotFoundError(CaseTrackError):
    """A referenced record does not exist."""


class FetchError(CaseTrackError):
    """One of the dashboard queries failed; the whole aggregation is aborted."""


class InvalidTransition(CaseTrackError):
    """A followup status change that the status workflow does not allow."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change followup status from {current} to {requested}")
