"""Name resolution with the device's configured resolver."""

import asyncio


def split_endpoint(endpoint: str) -> str:
    """Return the host part of ``host``, ``host:port`` or ``[v6-host]:port``.

    Raises:
        ValueError: If the endpoint has no host or a malformed port
    """
    endpoint = endpoint.strip()
    if endpoint.startswith("["):
        host, bracket, rest = endpoint[1:].partition("]")
        if not bracket or (rest and not (rest.startswith(":") and rest[1:].isdigit())):
            raise ValueError(f"malformed endpoint: {endpoint!r}")
    elif endpoint.count(":") == 1:
        host, port = endpoint.split(":")
        if not port.isdigit():
            raise ValueError(f"invalid port in endpoint: {endpoint!r}")
    else:
        host = endpoint
    if not host:
        raise ValueError(f"missing host in endpoint: {endpoint!r}")
    return host


async def resolve(host: str) -> list[str]:
    """Resolve ``host`` to its addresses.

    Raises:
        OSError: If the lookup failed (``socket.gaierror``)
    """
    infos = await asyncio.get_running_loop().getaddrinfo(host, None)
    return sorted({info[4][0] for info in infos})
