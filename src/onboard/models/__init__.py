"""Wire models shared by the device API and the wizard transport."""

from .status import (
    DNSStatus,
    ErrorResponse,
    LinkStatus,
    LogEntry,
    OnboardResponse,
    SystemdResult,
    SystemdStatus,
    SystemdSubState,
    is_error,
)

__all__ = [
    "DNSStatus",
    "ErrorResponse",
    "LinkStatus",
    "LogEntry",
    "OnboardResponse",
    "SystemdResult",
    "SystemdStatus",
    "SystemdSubState",
    "is_error",
]
