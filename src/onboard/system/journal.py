"""Following journal records of the services that bring the network up."""

import asyncio
from collections.abc import AsyncIterator

from loguru import logger

from onboard.exceptions import CommandError

NETWORKD_LOG = "systemd-networkd"
WPA_SUPPLICANT_LOG = "wpa_supplicant"
LOG_NAMES = (NETWORKD_LOG, WPA_SUPPLICANT_LOG)


def log_matchers(name: str, interface: str) -> list[str] | None:
    """Return the journalctl matches selecting log stream ``name``, or None if unknown."""
    if name == NETWORKD_LOG:
        return ["SYSLOG_IDENTIFIER=systemd-networkd", f"INTERFACE={interface}"]
    if name == WPA_SUPPLICANT_LOG:
        return [f"SYSLOG_IDENTIFIER=wpa_supplicant@{interface}"]
    return None


async def follow_journal(matchers: list[str]) -> AsyncIterator[str]:
    """Yield new journal records as JSON lines until the consumer stops.

    The journalctl process is terminated when the iterator is closed.

    Raises:
        CommandError: If journalctl is missing or exits with an error
    """
    command = ["journalctl", "--follow", "--output-fields=MESSAGE", "--output=json", *matchers]
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        raise CommandError(command, "command not found") from e

    logger.debug(f"Following journal (pid {process.pid}): {' '.join(matchers)}")
    try:
        if process.stdout is None:
            raise CommandError(command, "no output stream")
        async for raw in process.stdout:
            line = raw.decode(errors="replace").strip()
            if line:
                yield line
        returncode = await process.wait()
        if returncode != 0:
            raise CommandError(command, f"exited with status {returncode}")
    finally:
        if process.returncode is None:
            process.terminate()
            await process.wait()
        logger.debug(f"Stopped following journal (pid {process.pid})")
