"""Error types raised and delivered by the Courier client."""

from typing import Optional


class CourierConfigurationError(ValueError):
    """Raised when a client is constructed with an unusable base URL."""


class CourierError(Exception):
    """Structured failure delivered to completion callbacks.

    Carries the HTTP status code, a human readable message, the raw response
    bytes (if any) and the underlying transport error (if any).
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        data: Optional[bytes] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        size = len(self.data) if self.data is not None else None
        return (
            f"CourierError(status_code={self.status_code}, message={self.message!r}, "
            f"data_bytes={size}, cause={self.cause!r})"
        )


def invalid_url_error() -> CourierError:
    # URL construction failures surface as a not-found response
    return CourierError("Invalid URL.", 404)


def status_error(
    status_code: int, data: Optional[bytes] = None, cause: Optional[BaseException] = None
) -> CourierError:
    return CourierError("An error occurred.", status_code, data or None, cause)
