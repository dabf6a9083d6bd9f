"""
Unit tests for URL and base64 helpers.
"""

import pytest

from postal_client.errors import InvalidAddressError
from postal_client.utils import b64decode_str, b64encode_str, join_endpoint, parse_base_url


class TestUrls:
    def test_parse_base_url_normalises(self):
        assert parse_base_url("https://postal.example.com") == "https://postal.example.com/"

    def test_parse_base_url_rejects_relative(self):
        with pytest.raises(InvalidAddressError):
            parse_base_url("not a url")

    def test_join_endpoint_uses_absolute_path(self):
        joined = join_endpoint("https://postal.example.com/some/base", "/api/v1/send/raw")

        assert joined == "https://postal.example.com/api/v1/send/raw"

    def test_join_endpoint_requires_host(self):
        with pytest.raises(InvalidAddressError):
            join_endpoint("file:///srv/postal", "/api/v1/send/raw")


def test_base64_helpers_are_inverse():
    assert b64decode_str(b64encode_str(b"\x00\xffpostal")) == b"\x00\xffpostal"
