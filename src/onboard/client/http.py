"""HTTP transport to the device API.

Maps HTTP outcomes onto the verification engine's error model:
- 2xx: the parsed status model
- 4xx: the request was rejected, ``ProbeTransportError`` is raised
- 5xx: the device could not answer yet, an ``ErrorResponse`` is returned
- no response at all: ``ProbeConnectionError`` is raised
"""

import json
from collections.abc import AsyncIterator
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel

from onboard.configuration import WizardConfiguration
from onboard.constants import API_PREFIX
from onboard.exceptions import ProbeConnectionError, ProbeTransportError, SubmissionError
from onboard.models import DNSStatus, ErrorResponse, LinkStatus, LogEntry, SystemdStatus

T_Model = TypeVar("T_Model", bound=BaseModel)


class HttpTransport:
    """Async HTTP client for the device API.

    Example:
        ```python
        async with HttpTransport("http://onboard.local:8080") as transport:
            status = await transport.link()
        ```
    """

    def __init__(self, base_url: str, timeout: float = 5.0, client: httpx.AsyncClient | None = None):
        """Initialize the transport.

        Args:
            base_url: Base URL of the device API
            timeout: Timeout in seconds for a single request
            client: Pre-configured client (used by tests to mount a mock transport)
        """
        self.base_url = base_url
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.logger = logger.bind(component="HttpTransport")

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def link(self) -> LinkStatus | ErrorResponse:
        """Get the state and addresses of the onboarded interface."""
        return await self._status("/status/link", LinkStatus)

    async def dns(self, endpoint: str) -> DNSStatus | ErrorResponse:
        """Ask the device to resolve ``endpoint``."""
        return await self._status("/status/dns", DNSStatus, params={"endpoint": endpoint})

    async def systemd(self, unit: str) -> SystemdStatus | ErrorResponse:
        """Get the result and sub-state of a systemd unit."""
        return await self._status("/status/systemd", SystemdStatus, params={"unit": unit})

    async def onboard(self, payload: dict[str, str]) -> None:
        """Submit the collected values.

        Raises:
            SubmissionError: If the device is unreachable or rejected the values
        """
        try:
            response = await self._request("POST", "/onboard", json=payload)
        except ProbeConnectionError as e:
            raise SubmissionError(str(e)) from e
        except httpx.HTTPError as e:
            self.logger.error(f"Submission failed: {e}")
            raise SubmissionError(f"failed to submit values: {e}") from e

        if not response.is_success:
            message = self._error_message(response)
            self.logger.error(f"Submission rejected ({response.status_code}): {message}")
            raise SubmissionError(message)
        self.logger.info("Submission accepted")

    async def configuration(self) -> WizardConfiguration:
        """Fetch the fields and checks the wizard should present.

        Raises:
            ProbeTransportError: If the configuration could not be fetched
        """
        response = await self._request("GET", "/configuration")
        if not response.is_success:
            raise ProbeTransportError(self._error_message(response))
        return WizardConfiguration.model_validate(response.json())

    async def subscribe_logs(self, name: str) -> AsyncIterator[LogEntry]:
        """Follow a device log stream.

        Closing the returned iterator (or leaving the ``async for`` loop)
        ends the subscription.

        Args:
            name: Log stream name, e.g. ``systemd-networkd``

        Yields:
            LogEntry: One journal record per server-sent event
        """
        try:
            async with self._client.stream("GET", f"{API_PREFIX}/log/{name}", timeout=None) as response:
                if not response.is_success:
                    await response.aread()
                    raise ProbeTransportError(self._error_message(response))
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line.removeprefix("data:").strip()
                    if data:
                        yield LogEntry.model_validate(json.loads(data))
        except httpx.TransportError as e:
            raise ProbeConnectionError(f"failed to follow log {name!r}: {e}") from e

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{API_PREFIX}{path}"
        self.logger.trace(f"{method} {url}")
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            self.logger.debug(f"{method} {url} failed: {e}")
            raise ProbeConnectionError(f"failed to reach device: {e}") from e

    async def _status(self, path: str, model: type[T_Model], params: dict[str, str] | None = None) -> T_Model | ErrorResponse:
        response = await self._request("GET", path, params=params)
        if response.is_success:
            return model.model_validate(response.json() if response.content else {})

        message = self._error_message(response)
        if response.is_client_error:
            raise ProbeTransportError(message)
        self.logger.debug(f"GET {path} answered {response.status_code}: {message}")
        return ErrorResponse(error=message)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return str(response.json()["error"])
        except (ValueError, KeyError, TypeError):
            return response.text or response.reason_phrase
