"""Exception hierarchy shared by the aggregation core and its callers."""

import asyncio
from typing import Any


class StoriesError(Exception):
    """Base class for all application-level errors."""


class ValidationError(StoriesError):
    """A request parameter is out of range. Raised before any upstream I/O."""

    def __init__(self, param: str, value: Any, detail: str) -> None:
        self.param = param
        self.value = value
        self.detail = detail
        super().__init__(f"{param}={value!r}: {detail}")


class UpstreamError(StoriesError):
    """The item source failed at the transport or protocol level."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Upstream call '{operation}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# Cancellation is asyncio's own; it is re-exported so callers can name it
# alongside the other failure kinds.
CancellationError = asyncio.CancelledError
