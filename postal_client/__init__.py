"""Client for Postal's HTTP API (https://docs.postalserver.io/)."""

from .client import PostalClient
from .errors import (
    ExpectedAlternativeUrlError,
    InternalServerError,
    InvalidAddressError,
    MalformedResponseError,
    PostalError,
    ServiceError,
    ServiceUnavailableError,
    TransportError,
)
from .models import (
    Attachment,
    DetailsInterest,
    Expansion,
    Message,
    MessageHash,
    RawMessage,
    SendResult,
)

__all__ = [
    "PostalClient",
    "Attachment",
    "DetailsInterest",
    "Expansion",
    "Message",
    "MessageHash",
    "RawMessage",
    "SendResult",
    "PostalError",
    "TransportError",
    "InvalidAddressError",
    "ServiceError",
    "InternalServerError",
    "ServiceUnavailableError",
    "ExpectedAlternativeUrlError",
    "MalformedResponseError",
]
