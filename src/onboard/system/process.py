"""Helpers for running external commands without blocking the event loop."""

import asyncio

from loguru import logger

from onboard.exceptions import CommandError


async def run_command(*args: str) -> str:
    """Run a command to completion and return its standard output.

    Args:
        args: Program and arguments

    Returns:
        str: Decoded standard output

    Raises:
        CommandError: If the program is missing or exits with a non-zero status
    """
    command = list(args)
    logger.debug(f"Running command: {' '.join(command)}")
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise CommandError(command, "command not found") from e

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        message = stderr.decode(errors="replace").strip() or f"exited with status {process.returncode}"
        raise CommandError(command, message)
    return stdout.decode(errors="replace")
