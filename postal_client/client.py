"""HTTP client for Postal's server API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import requests
from requests import Response

from .envelope import decode_response, decode_send_response
from .errors import TransportError
from .models import DetailsInterest, Message, MessageHash, RawMessage, SendResult
from .utils import join_endpoint, parse_base_url

logger = logging.getLogger(__name__)


class PostalClient:
    """Send messages through Postal and look up what happened to them.

    The client only keeps the base address and the server API key, so one
    instance can be shared freely between threads. Every call performs a
    single POST; nothing is retried.
    """

    API_KEY_HEADER = "X-Server-API-Key"
    SEND_MESSAGE_PATH = "/api/v1/send/message"
    SEND_RAW_PATH = "/api/v1/send/raw"
    MESSAGE_DETAILS_PATH = "/api/v1/messages/message"
    MESSAGE_DELIVERIES_PATH = "/api/v1/messages/deliveries"

    def __init__(
        self,
        address: str,
        token: str,
        *,
        session: Any = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._address = parse_base_url(address)
        self._token = token
        # Anything exposing requests' ``post`` signature will do. Without one,
        # each call goes through the module-level ``requests.post`` and opens
        # its own connection; no session is kept between calls.
        self._http = session if session is not None else requests
        self._timeout = timeout

    @property
    def address(self) -> str:
        return self._address

    def send(self, message: Message) -> List[SendResult]:
        """Send a message composed with :class:`Message`."""
        response = self._post(self.SEND_MESSAGE_PATH, message.to_payload())
        return decode_send_response(response.status_code, response.content)

    def send_raw(self, message: RawMessage) -> List[SendResult]:
        """Send a standard RFC 2822 message."""
        response = self._post(self.SEND_RAW_PATH, message.to_payload())
        return decode_send_response(response.status_code, response.content)

    def get_message_details(
        self, interest: Union[DetailsInterest, MessageHash]
    ) -> Dict[str, Any]:
        """Ask Postal to describe a message.

        A bare message hash yields Postal's limited default description;
        pass a :class:`DetailsInterest` to request expansions.
        """
        if not isinstance(interest, DetailsInterest):
            interest = DetailsInterest(interest)
        response = self._post(self.MESSAGE_DETAILS_PATH, interest.to_payload())
        return decode_response(response.status_code, response.content, Dict[str, Any])

    def get_message_deliveries(self, message_id: MessageHash) -> List[Dict[str, Any]]:
        """Return the delivery attempts recorded for a message."""
        response = self._post(self.MESSAGE_DELIVERIES_PATH, {"id": message_id})
        return decode_response(response.status_code, response.content, List[Dict[str, Any]])

    def _post(self, path: str, payload: Dict[str, Any]) -> Response:
        url = join_endpoint(self._address, path)
        headers = {self.API_KEY_HEADER: self._token}
        logger.debug("POST %s", url)
        try:
            return self._http.post(
                url,
                json=payload,
                headers=headers,
                timeout=self._timeout,
                allow_redirects=False,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

    def __repr__(self) -> str:
        return f"PostalClient(address={self._address!r})"
