"""systemd unit inspection and control through ``systemctl``."""

from onboard.models import SystemdStatus

from .process import run_command

SHOW_PROPERTIES = ("Result", "SubState")


def parse_show_output(output: str) -> SystemdStatus:
    """Parse ``systemctl show --property ...`` output.

    Lines are ``Key=Value`` pairs; unknown keys and malformed lines are ignored.
    """
    properties: dict[str, str] = {}
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split("=")
        if len(parts) != 2:
            continue
        properties[parts[0]] = parts[1]
    return SystemdStatus(result=properties.get("Result", ""), sub_state=properties.get("SubState", ""))


async def show_unit(unit: str) -> SystemdStatus:
    """Return the Result and SubState properties of ``unit``.

    Raises:
        CommandError: If systemctl failed
    """
    args = ["systemctl", "show", unit]
    for name in SHOW_PROPERTIES:
        args.extend(["--property", name])
    return parse_show_output(await run_command(*args))


async def control_unit(command: str, unit: str) -> None:
    """Run ``systemctl <command> <unit>``.

    Raises:
        CommandError: If systemctl failed
    """
    await run_command("systemctl", command, unit)
