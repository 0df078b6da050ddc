"""Exceptions raised by the lunch events pipeline."""


class LunchEventsError(Exception):
    """Base class for pipeline errors."""


class RangeValidationError(LunchEventsError):
    """Caller supplied a missing, malformed or out-of-policy date range."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamTimeout(LunchEventsError):
    """connpass answered with a gateway timeout."""


class PipelineCancelled(LunchEventsError):
    """The request was cancelled while partitions were still in flight."""
