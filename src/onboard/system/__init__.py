"""Device-side access to the network link, resolver, systemd and journal."""

from .actions import ActionRunner
from .dns import resolve, split_endpoint
from .journal import LOG_NAMES, follow_journal, log_matchers
from .link import format_address, read_link
from .mdns import SERVICE_TYPE, ServiceAdvertiser, build_service_info
from .process import run_command
from .systemctl import control_unit, parse_show_output, show_unit

__all__ = [
    "LOG_NAMES",
    "SERVICE_TYPE",
    "ActionRunner",
    "ServiceAdvertiser",
    "build_service_info",
    "control_unit",
    "follow_journal",
    "format_address",
    "log_matchers",
    "parse_show_output",
    "read_link",
    "resolve",
    "run_command",
    "show_unit",
    "split_endpoint",
]
