"""Decoding of Postal's response envelope.

Every Postal endpoint answers with a JSON object tagged by ``status``:

* ``success`` carries ``time``, ``flags`` and the endpoint specific ``data``;
* ``error`` carries ``time``, ``flags`` and ``data: {code, message}``;
* ``parameter-error`` has no documented body.

Decoding happens in two stages. The HTTP status is triaged first (only 200
carries an envelope at all), then the body is validated against the tagged
union and unwrapped into the payload type requested by the caller.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Literal, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import (
    ExpectedAlternativeUrlError,
    InternalServerError,
    MalformedResponseError,
    ServiceError,
    ServiceUnavailableError,
)
from .models import MessageHash, SendResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

REDIRECT_STATUSES = frozenset({301, 308})


class SuccessEnvelope(BaseModel):
    status: Literal["success"]
    time: float
    flags: Dict[str, Any] = Field(default_factory=dict)
    data: Any = None


class ParameterErrorEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Literal["parameter-error", "parameterError"]


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorEnvelope(BaseModel):
    status: Literal["error"]
    time: float
    flags: Dict[str, Any] = Field(default_factory=dict)
    data: ErrorDetail


Envelope = Annotated[
    Union[SuccessEnvelope, ParameterErrorEnvelope, ErrorEnvelope],
    Field(discriminator="status"),
]

_ENVELOPE_ADAPTER: TypeAdapter = TypeAdapter(Envelope)


@lru_cache(maxsize=None)
def _payload_adapter(payload_type: Any) -> TypeAdapter:
    return TypeAdapter(payload_type)


class RecipientMessage(BaseModel):
    id: MessageHash
    token: str


class SendSuccessData(BaseModel):
    """``data`` of a successful ``/send/message`` or ``/send/raw`` call."""

    message_id: str
    messages: Dict[str, RecipientMessage]


def check_status(status_code: int, body: Any = None) -> None:
    """Raise unless the HTTP status means an envelope follows."""
    if status_code == 200:
        return
    logger.error("Postal request failed (%s): %s", status_code, body)
    if status_code == 500:
        raise InternalServerError()
    if status_code in REDIRECT_STATUSES:
        raise ExpectedAlternativeUrlError(status_code)
    if status_code == 503:
        raise ServiceUnavailableError()
    raise MalformedResponseError(f"Undocumented HTTP status {status_code}")


def parse_envelope(body: Union[str, bytes, Dict[str, Any]]):
    """Validate a raw body against the tagged union of envelope shapes."""
    try:
        if isinstance(body, (str, bytes, bytearray)):
            return _ENVELOPE_ADAPTER.validate_json(body)
        return _ENVELOPE_ADAPTER.validate_python(body)
    except ValidationError as exc:
        raise MalformedResponseError(f"Unrecognised Postal envelope: {exc}") from exc


def unwrap_envelope(envelope) -> Any:
    """Return the success payload or raise the failure the envelope describes."""
    if isinstance(envelope, SuccessEnvelope):
        return envelope.data
    if isinstance(envelope, ErrorEnvelope):
        raise ServiceError(code=envelope.data.code, message=envelope.data.message)
    logger.warning("Postal reported a parameter error: %s", envelope.model_dump())
    raise MalformedResponseError("Postal reported a parameter error with no documented body")


def decode_response(
    status_code: int,
    body: Union[str, bytes, Dict[str, Any]],
    payload_type: Union[Type[T], Any] = Any,
) -> T:
    """Triage the status, unwrap the envelope and validate ``data``."""
    check_status(status_code, body)
    data = unwrap_envelope(parse_envelope(body))
    try:
        return _payload_adapter(payload_type).validate_python(data)
    except ValidationError as exc:
        raise MalformedResponseError(f"Unexpected payload in Postal response: {exc}") from exc


def decode_send_response(
    status_code: int, body: Union[str, bytes, Dict[str, Any]]
) -> List[SendResult]:
    """Flatten the per-recipient mapping of a send call into results."""
    data = decode_response(status_code, body, SendSuccessData)
    results = [SendResult(to=to, id=message.id) for to, message in data.messages.items()]
    logger.debug("Postal accepted message %s for %d recipient(s)", data.message_id, len(results))
    return results
