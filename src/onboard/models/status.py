"""Status models exchanged between the device API and the wizard.

The same models are produced by the API routers and parsed by the HTTP
transport, so both halves agree on the wire format.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SystemdResult(StrEnum):
    """Result property reported by ``systemctl show``."""

    SUCCESS = "success"
    FAILED = "failed"


class SystemdSubState(StrEnum):
    """SubState property reported by ``systemctl show`` for one-shot units."""

    DEAD = "dead"
    START = "start"


class ErrorResponse(BaseModel):
    """Error body returned by the device API."""

    error: str


class LinkStatus(BaseModel):
    """Operational state and addresses of the onboarded network interface."""

    state: str
    addresses: list[str] = Field(default_factory=list)


class DNSStatus(BaseModel):
    """Empty body returned when an endpoint resolved."""


class SystemdStatus(BaseModel):
    """Result and sub-state of a systemd unit."""

    model_config = ConfigDict(populate_by_name=True)

    result: str = ""
    sub_state: str = Field(default="", alias="subState")

    @property
    def finished(self) -> bool:
        """True once the unit ran to completion successfully."""
        return self.result == SystemdResult.SUCCESS and self.sub_state == SystemdSubState.DEAD


class OnboardResponse(BaseModel):
    """Empty body returned when every action ran."""


class LogEntry(BaseModel):
    """One journal record as emitted by ``journalctl --output=json``."""

    model_config = {"extra": "ignore"}

    message: str = Field(default="", alias="MESSAGE")
    timestamp: str = Field(default="", alias="__REALTIME_TIMESTAMP")


def is_error(response: BaseModel) -> bool:
    """Return True if ``response`` is an error body."""
    return isinstance(response, ErrorResponse)
