"""Status endpoints polled by the wizard's verification checks."""

from fastapi import APIRouter, Depends
from loguru import logger

from onboard.exceptions import APIError, CommandError, LinkNotFoundError
from onboard.models import DNSStatus, LinkStatus, SystemdStatus
from onboard.settings import Settings
from onboard.system import read_link, resolve, show_unit, split_endpoint

from .dependencies import get_app_settings

router = APIRouter(prefix="/status", tags=["Status"])

# Define the dependencies as module-level variables
settings_dependency = Depends(get_app_settings)


@router.get("/link", response_model=LinkStatus)
async def link_status(settings: Settings = settings_dependency) -> LinkStatus:
    """
    Operational state and addresses of the onboarded interface.

    Returns:
        LinkStatus: e.g. {"state": "up", "addresses": ["192.168.1.20/24"]}
    """
    try:
        return read_link(settings.interface)
    except LinkNotFoundError as e:
        logger.error(f"Failed to find link: {e}")
        raise APIError("failed to find interface", status_code=500) from e
    except OSError as e:
        logger.error(f"Failed to list addresses of {settings.interface}: {e}")
        raise APIError("failed to list addresses", status_code=500) from e


@router.get("/dns", response_model=DNSStatus)
async def dns_status(endpoint: str = "") -> DNSStatus:
    """
    Resolve ``endpoint`` (``host`` or ``host:port``) with the device's resolver.

    Returns:
        DNSStatus: An empty body when at least one address was found
    """
    try:
        host = split_endpoint(endpoint)
    except ValueError as e:
        logger.warning(f"Failed to parse endpoint {endpoint!r}: {e}")
        raise APIError("failed to parse endpoint") from e

    try:
        addresses = await resolve(host)
    except OSError as e:
        logger.info(f"Failed to look up {host}: {e}")
        raise APIError("failed to lookup hostname", status_code=500) from e

    if not addresses:
        raise APIError("found no addresses for host", status_code=500)
    logger.debug(f"Resolved {host}: {addresses}")
    return DNSStatus()


@router.get("/systemd", response_model=SystemdStatus)
async def systemd_status(unit: str = "") -> SystemdStatus:
    """
    Result and sub-state of a systemd unit.

    Returns:
        SystemdStatus: e.g. {"result": "success", "subState": "dead"}
    """
    if not unit:
        raise APIError("received empty unit")
    try:
        return await show_unit(unit)
    except CommandError as e:
        logger.error(f"Failed to get status of {unit}: {e}")
        raise APIError("failed to get unit status") from e
