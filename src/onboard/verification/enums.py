"""Enums for the verification engine.

This module contains basic enums to avoid circular dependencies.
"""

from enum import StrEnum


class RunState(StrEnum):
    """Run state of an individual check unit."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GroupState(StrEnum):
    """Overall state of a check group."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"  # Stuck on a failed unit until the group is rebuilt
    CANCELLED = "cancelled"
