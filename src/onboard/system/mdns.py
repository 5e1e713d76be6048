"""Advertising the device API over mDNS.

The device announces itself as an ``_http._tcp`` service on ``onboard.local.``
so that the wizard can find it on the setup network without knowing its
address.
"""

from collections.abc import Callable

from loguru import logger
from zeroconf import ServiceInfo
from zeroconf.asyncio import AsyncZeroconf

SERVICE_TYPE = "_http._tcp.local."
SERVER_NAME = "onboard.local."


def build_service_info(device_id: str, ip_address: str, port: int) -> ServiceInfo:
    """Describe the device API as an mDNS service.

    Args:
        device_id: Identifier published in the instance name and the ``id`` property
        ip_address: Address the device API is reachable on
        port: Port of the device API
    """
    instance = f"Onboard {device_id}".strip()
    return ServiceInfo(
        SERVICE_TYPE,
        f"{instance}.{SERVICE_TYPE}",
        port=port,
        properties={"id": device_id},
        server=SERVER_NAME,
        parsed_addresses=[ip_address],
    )


class ServiceAdvertiser:
    """Registers a service for as long as the device API runs."""

    def __init__(self, info: ServiceInfo, zeroconf_factory: Callable[[], AsyncZeroconf] | None = None):
        """Initialize the advertiser.

        Args:
            info: Service to announce
            zeroconf_factory: Builds the responder (default: ``AsyncZeroconf``)
        """
        self.info = info
        self._zeroconf_factory = zeroconf_factory or AsyncZeroconf
        self._zeroconf: AsyncZeroconf | None = None

    async def start(self) -> None:
        """Announce the service; the announcements continue in the background."""
        self._zeroconf = self._zeroconf_factory()
        await self._zeroconf.async_register_service(self.info)
        logger.info(f"Advertising '{self.info.name}' on {self.info.parsed_addresses()} port {self.info.port}")

    async def stop(self) -> None:
        """Withdraw the service and close the responder."""
        if self._zeroconf is None:
            return
        zeroconf, self._zeroconf = self._zeroconf, None
        try:
            await (await zeroconf.async_unregister_service(self.info))
        finally:
            await zeroconf.async_close()
        logger.info(f"Stopped advertising '{self.info.name}'")
