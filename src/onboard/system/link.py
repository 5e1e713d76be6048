"""State and addresses of a network interface."""

import ipaddress
import socket
from pathlib import Path

import psutil
from loguru import logger

from onboard.constants import LINK_STATE_UP
from onboard.exceptions import LinkNotFoundError
from onboard.models import LinkStatus

SYS_CLASS_NET = Path("/sys/class/net")
ADDRESS_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def format_address(address: str, netmask: str | None) -> str:
    """Format an interface address as ``address/prefix``.

    The IPv6 zone suffix (``%wlan0``) is dropped. Without a usable netmask the
    bare address is returned.
    """
    address = address.split("%", 1)[0]
    if not netmask:
        return address
    try:
        prefix = bin(int(ipaddress.ip_address(netmask))).count("1")
    except ValueError:
        return address
    return f"{address}/{prefix}"


def _operstate(interface: str, sys_class_net: Path) -> str | None:
    try:
        return (sys_class_net / interface / "operstate").read_text(encoding="utf-8").strip()
    except OSError:
        return None


def read_link(interface: str, sys_class_net: Path = SYS_CLASS_NET) -> LinkStatus:
    """Return the operational state and addresses of ``interface``.

    The kernel's ``operstate`` is preferred; where it is unavailable the
    interface flags decide between "up" and "down".

    Raises:
        LinkNotFoundError: If the interface does not exist
    """
    stats = psutil.net_if_stats()
    if interface not in stats:
        raise LinkNotFoundError(interface)

    state = _operstate(interface, sys_class_net) or (LINK_STATE_UP if stats[interface].isup else "down")
    addresses = [
        format_address(entry.address, entry.netmask)
        for entry in psutil.net_if_addrs().get(interface, [])
        if entry.family in ADDRESS_FAMILIES
    ]
    logger.trace(f"Link {interface}: state={state}, addresses={addresses}")
    return LinkStatus(state=state, addresses=addresses)
