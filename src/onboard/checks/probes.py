"""Probe adapters turning transport status calls into boolean probes.

An ``ErrorResponse`` from the transport means the device could not answer yet
and counts as "not ready". Raised transport errors propagate and abort the
check. The network bring-up probe can be told to treat an unreachable device
as "not ready" instead.
"""

from loguru import logger

from onboard.client.protocol import StatusTransport
from onboard.constants import LINK_STATE_UP
from onboard.exceptions import ProbeConnectionError
from onboard.models import is_error
from onboard.verification import Probe


def link_up_probe(transport: StatusTransport, tolerate_connection_errors: bool = True) -> Probe:
    """Probe that is ready once the interface reports operational state "up".

    Args:
        transport: Status transport to query
        tolerate_connection_errors: Treat an unreachable device as "not ready"
            instead of failing the check
    """

    async def probe() -> bool:
        try:
            status = await transport.link()
        except ProbeConnectionError as e:
            if not tolerate_connection_errors:
                raise
            logger.debug(f"Device not reachable yet, retrying: {e}")
            return False
        return not is_error(status) and status.state == LINK_STATE_UP

    return probe


def address_assigned_probe(transport: StatusTransport) -> Probe:
    """Probe that is ready once the interface has at least one address."""

    async def probe() -> bool:
        status = await transport.link()
        return not is_error(status) and len(status.addresses) > 0

    return probe


def dns_probe(transport: StatusTransport, endpoint: str) -> Probe:
    """Probe that is ready once the device resolves ``endpoint``.

    Args:
        transport: Status transport to query
        endpoint: Literal value collected by the wizard
    """

    async def probe() -> bool:
        return not is_error(await transport.dns(endpoint))

    return probe


def service_probe(transport: StatusTransport, unit: str) -> Probe:
    """Probe that is ready once a systemd unit ran to completion successfully.

    Args:
        transport: Status transport to query
        unit: systemd unit identifier
    """

    async def probe() -> bool:
        status = await transport.systemd(unit)
        return not is_error(status) and status.finished

    return probe
