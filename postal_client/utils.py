"""Utility helpers shared across modules."""

from __future__ import annotations

import base64
from urllib.parse import urljoin, urlsplit

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .errors import InvalidAddressError

_URL_ADAPTER = TypeAdapter(AnyUrl)


def parse_base_url(value: str) -> str:
    """Validate an absolute URL and return it in normalised form."""
    try:
        return str(_URL_ADAPTER.validate_python(value))
    except ValidationError as exc:
        raise InvalidAddressError(f"Invalid Postal address: {value!r}") from exc


def join_endpoint(base_url: str, path: str) -> str:
    """Resolve an API path against the base address like a browser would."""
    joined = urljoin(base_url, path)
    parts = urlsplit(joined)
    if not parts.scheme or not parts.netloc:
        raise InvalidAddressError(f"Cannot join {path!r} onto {base_url!r}")
    return joined


def b64encode_str(payload: bytes) -> str:
    """Base64-encode bytes into the ASCII text Postal expects."""
    return base64.b64encode(payload).decode("ascii")


def b64decode_str(value: str) -> bytes:
    """Inverse of :func:`b64encode_str`."""
    return base64.b64decode(value, validate=True)
