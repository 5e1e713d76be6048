"""Transport interfaces consumed by the probes and the wizard."""

from typing import Protocol

from onboard.models import DNSStatus, ErrorResponse, LinkStatus, SystemdStatus


class StatusTransport(Protocol):
    """Answers status questions about the device being onboarded.

    Each method returns the parsed status, or an ``ErrorResponse`` when the
    device could not answer yet. Requests that were rejected outright raise
    ``ProbeTransportError``; an unreachable device raises
    ``ProbeConnectionError``.
    """

    async def link(self) -> LinkStatus | ErrorResponse: ...

    async def dns(self, endpoint: str) -> DNSStatus | ErrorResponse: ...

    async def systemd(self, unit: str) -> SystemdStatus | ErrorResponse: ...


class OnboardTransport(StatusTransport, Protocol):
    """Status transport that can also submit the collected values."""

    async def onboard(self, payload: dict[str, str]) -> None:
        """Submit the collected values.

        Raises:
            SubmissionError: If the device rejected the values
        """
        ...
