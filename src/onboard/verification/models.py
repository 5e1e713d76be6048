"""Data models for the verification engine.

This module contains the Pydantic models shared by the poller, check units and
check groups: the immutable retry policy and the read-only snapshots handed to
observers.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import GroupState, RunState


class RetryPolicy(BaseModel):
    """Attempt budget of a check: how often to probe and how long to wait in between."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=10, ge=1)
    interval: float = Field(default=5.0, ge=0)  # seconds between attempts

    @classmethod
    def single_attempt(cls) -> "RetryPolicy":
        """Return a policy that probes exactly once without any delay."""
        return cls(max_attempts=1, interval=0)


class CheckUnitSnapshot(BaseModel):
    """Observable state of a check unit at one point in time."""

    model_config = {"use_enum_values": True}

    label: str
    state: RunState
    failure_reason: str | None = None
    attempts: int = 0
    max_attempts: int = 1
    started_at: str | None = None  # ISO 8601 UTC timestamp
    finished_at: str | None = None  # ISO 8601 UTC timestamp
    weight: float = 1.0


class CheckGroupSnapshot(BaseModel):
    """Observable state of a check group: only the exposed units are listed."""

    model_config = {"use_enum_values": True}

    state: GroupState
    cursor: int = 0
    total_units: int = 0
    units: list[CheckUnitSnapshot] = Field(default_factory=list)
