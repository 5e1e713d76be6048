"""Tests for endpoint parsing and name resolution."""

import pytest

from onboard.system import resolve, split_endpoint


class TestSplitEndpoint:
    """Test cases for split_endpoint."""

    @pytest.mark.parametrize(
        "endpoint,host",
        [
            ("example.com", "example.com"),
            ("example.com:443", "example.com"),
            ("10.0.0.1:53", "10.0.0.1"),
            ("[2001:db8::1]:443", "2001:db8::1"),
            ("[2001:db8::1]", "2001:db8::1"),
            ("2001:db8::1", "2001:db8::1"),
        ],
    )
    def test_host(self, endpoint: str, host: str):
        assert split_endpoint(endpoint) == host

    @pytest.mark.parametrize("endpoint", ["", ":443", "example.com:https", "[2001:db8::1", "[2001:db8::1]x"])
    def test_invalid(self, endpoint: str):
        with pytest.raises(ValueError):
            split_endpoint(endpoint)


class TestResolve:
    """Test cases for resolve."""

    @pytest.mark.asyncio
    async def test_localhost(self):
        addresses = await resolve("localhost")

        assert addresses
        assert all(isinstance(address, str) for address in addresses)
