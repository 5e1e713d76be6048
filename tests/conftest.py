"""Shared fixtures: a recording sleep, an in-memory device transport and an mDNS responder."""

import asyncio

import pytest

from onboard.exceptions import SubmissionError
from onboard.models import DNSStatus, LinkStatus, SystemdStatus
from onboard.settings import Settings
from onboard.verification import BoundedPoller


class RecordingSleep:
    """Sleep replacement that records the requested delays and returns at once."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class FakeStatusTransport:
    """In-memory device API.

    Each ``*_responses`` list is consumed in order; its last entry is repeated
    once the others are used up. Exceptions in the lists are raised.
    """

    def __init__(self):
        self.link_responses: list = []
        self.dns_responses: list = []
        self.systemd_responses: list = []
        self.calls: list[tuple[str, ...]] = []
        self.submitted: list[dict[str, str]] = []
        self.reject_with: str | None = None

    async def link(self):
        self.calls.append(("link",))
        return self._next(self.link_responses, LinkStatus(state="up", addresses=["192.168.1.20/24"]))

    async def dns(self, endpoint: str):
        self.calls.append(("dns", endpoint))
        return self._next(self.dns_responses, DNSStatus())

    async def systemd(self, unit: str):
        self.calls.append(("systemd", unit))
        return self._next(self.systemd_responses, SystemdStatus(result="success", sub_state="dead"))

    async def onboard(self, payload: dict[str, str]) -> None:
        self.submitted.append(payload)
        if self.reject_with is not None:
            raise SubmissionError(self.reject_with)

    @staticmethod
    def _next(responses: list, default):
        if not responses:
            return default
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return response



class FakeZeroconf:
    """AsyncZeroconf stand-in recording the calls made to it."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    async def async_register_service(self, info):
        self.calls.append(("register", info.name))
        return asyncio.sleep(0)

    async def async_unregister_service(self, info):
        self.calls.append(("unregister", info.name))
        return asyncio.sleep(0)

    async def async_close(self):
        self.calls.append(("close", ""))


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def poller(recording_sleep: RecordingSleep) -> BoundedPoller:
    return BoundedPoller(sleep=recording_sleep)


@pytest.fixture
def transport() -> FakeStatusTransport:
    return FakeStatusTransport()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, check_max_attempts=10, check_interval=5.0, service_check_max_attempts=20)


@pytest.fixture
def zeroconf(monkeypatch) -> FakeZeroconf:
    """Replace the real mDNS responder for the duration of the test."""
    fake = FakeZeroconf()
    monkeypatch.setattr("onboard.system.mdns.AsyncZeroconf", lambda: fake)
    return fake
