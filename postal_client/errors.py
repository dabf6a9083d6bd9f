"""Exception hierarchy raised by the Postal client."""

from __future__ import annotations


class PostalError(Exception):
    """Base class for every failure the client reports."""


class TransportError(PostalError):
    """The HTTP request itself failed (connection, TLS, timeout)."""


class InvalidAddressError(PostalError):
    """The base address or a joined endpoint is not an absolute URL."""


class ServiceError(PostalError):
    """Postal answered with an ``error`` envelope."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"send error({code!r}): {message!r}")
        self.code = code
        self.message = message


class InternalServerError(PostalError):
    def __init__(self) -> None:
        super().__init__("internal error on postal side")


class ServiceUnavailableError(PostalError):
    def __init__(self) -> None:
        super().__init__("postal server unavailable")


class ExpectedAlternativeUrlError(PostalError):
    """Postal redirected the request; resubmit to the new location."""

    def __init__(self, status_code: int) -> None:
        super().__init__("request should likely be sent to another URL")
        self.status_code = status_code


class MalformedResponseError(PostalError):
    """The response does not follow the documented envelope contract."""
