"""Typed request and result containers for the Postal API."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .utils import b64decode_str, b64encode_str

# Opaque identifier Postal assigns to every sent message.
MessageHash = int


def _as_list(addresses: Union[str, Iterable[str]]) -> list[str]:
    if isinstance(addresses, str):
        return [addresses]
    return list(addresses)


class _WirePayload(BaseModel):
    """Frozen model whose unset fields never reach the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the JSON body Postal expects, dropping absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]):
        return cls.model_validate(payload)

    def _with(self, **changes: Any):
        # Rebuilt from a fresh dump so the copy shares no lists with self and
        # the changed field goes through validation.
        return self.model_validate({**self.model_dump(exclude_none=True), **changes})


class Attachment(_WirePayload):
    """A file attached to a :class:`Message`; ``data`` is base64 on the wire."""

    name: str
    content_type: str = "application/octet-stream"
    data: bytes

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, value):
        if isinstance(value, str):
            return b64decode_str(value)
        return value

    @field_serializer("data")
    def _encode_data(self, value: bytes) -> str:
        return b64encode_str(value)

    def __repr__(self) -> str:
        return (
            f"Attachment("
            f"name={self.name!r}, "
            f"content_type={self.content_type!r}, "
            f"data_size={len(self.data)} bytes)"
        )


class Message(_WirePayload):
    """An e-mail composed field by field and sent via ``/send/message``.

    Every field starts out absent. The ``with_*`` methods return a new
    message with a single field replaced, so a partially configured message
    can be shared and extended safely::

        message = (
            Message()
            .with_to(["someone@example.com"])
            .with_from("test@yourserver.io")
            .with_subject("Hello World")
            .with_text("A test message")
        )

    Postal accepts at most 50 addresses in each of ``to``, ``cc`` and
    ``bcc``; the limit is enforced by the server, not here.
    """

    to: Optional[List[str]] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    from_: Optional[str] = Field(None, alias="from")
    sender: Optional[str] = None
    subject: Optional[str] = None
    tag: Optional[str] = None
    reply_to: Optional[str] = None
    plain_body: Optional[str] = None
    html_body: Optional[str] = None
    attachments: Optional[List[Attachment]] = None
    # Postal documents a hash of extra headers; an integer reference is
    # passed through untouched.
    headers: Optional[Union[MessageHash, Dict[str, str]]] = None
    bounce: Optional[bool] = None

    def with_to(self, addresses: Union[str, Iterable[str]]) -> "Message":
        return self._with(to=_as_list(addresses))

    def with_cc(self, addresses: Union[str, Iterable[str]]) -> "Message":
        return self._with(cc=_as_list(addresses))

    def with_bcc(self, addresses: Union[str, Iterable[str]]) -> "Message":
        return self._with(bcc=_as_list(addresses))

    def with_from(self, address: str) -> "Message":
        """Set the address used for the From header."""
        return self._with(from_=address)

    def with_sender(self, address: str) -> "Message":
        """Set the address used for the Sender header."""
        return self._with(sender=address)

    def with_subject(self, subject: str) -> "Message":
        return self._with(subject=subject)

    def with_tag(self, tag: str) -> "Message":
        return self._with(tag=tag)

    def with_reply_to(self, address: str) -> "Message":
        return self._with(reply_to=address)

    def with_text(self, body: str) -> "Message":
        """Set the plain text body."""
        return self._with(plain_body=body)

    def with_html(self, body: str) -> "Message":
        """Set the HTML body."""
        return self._with(html_body=body)

    def with_attachments(self, attachments: Iterable[Attachment]) -> "Message":
        return self._with(attachments=list(attachments))

    def with_attachment(self, attachment: Attachment) -> "Message":
        """Append one attachment to whatever is already attached."""
        return self._with(attachments=[*(self.attachments or []), attachment])

    def with_headers(self, headers: Union[MessageHash, Dict[str, str]]) -> "Message":
        if isinstance(headers, dict):
            headers = dict(headers)
        return self._with(headers=headers)

    def with_bounce(self, bounce: bool = True) -> "Message":
        return self._with(bounce=bounce)


class RawMessage(_WirePayload):
    """A ready-made RFC 2822 message sent via ``/send/raw``."""

    mail_from: str
    rcpt_to: List[str]
    data: str
    bounce: Optional[bool] = None

    @classmethod
    def from_bytes(
        cls, mail_from: str, rcpt_to: Union[str, Iterable[str]], raw: bytes
    ) -> "RawMessage":
        """Build a raw message from undecoded RFC 2822 bytes."""
        return cls(mail_from=mail_from, rcpt_to=_as_list(rcpt_to), data=b64encode_str(raw))

    def with_bounce(self, bounce: bool = True) -> "RawMessage":
        return self._with(bounce=bounce)


class Expansion(StrEnum):
    """Optional detail sections of ``/messages/message``."""

    STATUS = "status"
    DETAILS = "details"
    INSPECTION = "inspection"
    PLAIN_BODY = "plain_body"
    HTML_BODY = "html_body"
    ATTACHMENTS = "attachments"
    HEADERS = "headers"
    RAW_MESSAGE = "raw_message"


# Order in which expansions are written to the request. Attachments are
# accepted by DetailsInterest but never requested.
RENDERED_EXPANSIONS = (
    Expansion.STATUS,
    Expansion.DETAILS,
    Expansion.INSPECTION,
    Expansion.PLAIN_BODY,
    Expansion.HTML_BODY,
    Expansion.HEADERS,
    Expansion.RAW_MESSAGE,
)


@dataclass(frozen=True)
class DetailsInterest:
    """Which message to describe and which expansions to include.

    By default Postal returns a limited description of a message; each
    ``with_*`` call asks for one more section. Setting a flag twice has no
    further effect.
    """

    id: MessageHash
    flags: FrozenSet[Expansion] = field(default_factory=frozenset)

    def with_expansion(self, expansion: Union[Expansion, str]) -> "DetailsInterest":
        return replace(self, flags=self.flags | {Expansion(expansion)})

    def with_status(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.STATUS)

    def with_details(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.DETAILS)

    def with_inspection(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.INSPECTION)

    def with_plain_body(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.PLAIN_BODY)

    def with_html_body(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.HTML_BODY)

    def with_attachments(self) -> "DetailsInterest":
        """Record interest in attachments.

        The flag is kept on the interest but is not sent to Postal; see
        :data:`RENDERED_EXPANSIONS`.
        """
        return self.with_expansion(Expansion.ATTACHMENTS)

    def with_headers(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.HEADERS)

    def with_raw_message(self) -> "DetailsInterest":
        return self.with_expansion(Expansion.RAW_MESSAGE)

    def expansions(self) -> list[str]:
        return [expansion.value for expansion in RENDERED_EXPANSIONS if expansion in self.flags]

    def to_payload(self) -> dict[str, Any]:
        """Render the request body for ``/messages/message``."""
        payload: dict[str, Any] = {"id": self.id}
        expansions = self.expansions()
        if expansions:
            payload["_expansions"] = expansions
        return payload


@dataclass(frozen=True)
class SendResult:
    """One recipient of a sent message and the hash Postal assigned to it."""

    to: str
    id: MessageHash
