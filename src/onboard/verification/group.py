"""Check groups: strictly gated, one-at-a-time sequencing of check units.

This module provides the CheckGroup class, which runs an ordered list of
CheckUnits left to right. Only the prefix of units up to and including the
first unit that has not yet succeeded is exposed to observers; the next unit is
started automatically once the active one succeeds.

Key Features:
- Never runs two units at the same time
- Never skips a failed unit: a failure stops forward progress for good
- Observers see immutable snapshots with a per-unit display weight
- Cancellation tears down the active unit's poller

Typical Usage:
    group = CheckGroup([
        CheckUnit("Bringing Up Network", link_up),
        CheckUnit("Getting IP Address", has_address),
        CheckUnit("Done", always_true, RetryPolicy.single_attempt()),
    ])

    snapshot = await group.run()
    if snapshot.state == GroupState.SUCCEEDED:
        print("Device is online")
"""

import asyncio
from collections.abc import Sequence

from loguru import logger

from .enums import GroupState, RunState
from .models import CheckGroupSnapshot
from .unit import CheckUnit

# Number of units over which the display weight fades from 1 to 0
FADE_SPAN = 4


def display_weight(total: int, position: int) -> float:
    """Return the display weight of an exposed unit.

    The active (last exposed) unit weighs 1.0; each unit before it weighs
    1/FADE_SPAN less, never dropping below 0.

    Args:
        total: Number of exposed units
        position: Index of the unit among the exposed units

    Returns:
        float: Weight in [0, 1]
    """
    return max(0.0, 1 - (total - 1 - position) / FADE_SPAN)


class CheckGroup:
    """Ordered, strictly gated runner of CheckUnits.

    Attributes:
        units: The immutable, ordered tuple of units
        cursor: Number of leading units that have succeeded
    """

    def __init__(self, units: Sequence[CheckUnit]):
        """Initialize the group with pre-built, not yet started units.

        Args:
            units: Units to run, in order
        """
        self.units: tuple[CheckUnit, ...] = tuple(units)
        self.cursor = 0
        self._started = False
        self._cancelled = False
        self._settled = asyncio.Event()

        for unit in self.units:
            unit.add_listener(self._on_unit_finished)

    @property
    def state(self) -> GroupState:
        """Overall state derived from the cursor and the active unit."""
        if self._cancelled:
            return GroupState.CANCELLED
        if self.cursor >= len(self.units) and self._started:
            return GroupState.SUCCEEDED
        if not self._started:
            return GroupState.NOT_STARTED
        if self.units[self.cursor].state == RunState.FAILED:
            return GroupState.FAILED
        return GroupState.RUNNING

    @property
    def active_unit(self) -> CheckUnit | None:
        """The unit at the cursor, or None once every unit succeeded."""
        if self.cursor < len(self.units):
            return self.units[self.cursor]
        return None

    @property
    def exposed_units(self) -> tuple[CheckUnit, ...]:
        """Succeeded units plus the active one; later units stay hidden."""
        return self.units[: self.cursor + 1]

    def start(self) -> None:
        """Start the first unit. Calling it again does nothing."""
        if self._started:
            return
        self._started = True
        logger.info(f"Starting check group with {len(self.units)} checks")

        if not self.units:
            self._settled.set()
            return
        self.units[0].start()

    async def wait(self) -> GroupState:
        """Wait until the group succeeded, failed or was cancelled.

        Returns:
            GroupState: The terminal state
        """
        await self._settled.wait()
        return self.state

    async def run(self) -> CheckGroupSnapshot:
        """Start the group and wait for it to settle.

        Returns:
            CheckGroupSnapshot: Snapshot of the settled group
        """
        self.start()
        await self.wait()
        return self.snapshot()

    def cancel(self) -> None:
        """Tear the group down, cancelling the active unit's poller."""
        if self._cancelled or self._settled.is_set():
            return
        self._cancelled = True
        active = self.active_unit
        if active is not None:
            active.cancel()
        logger.info("Check group cancelled")
        self._settled.set()

    def snapshot(self) -> CheckGroupSnapshot:
        """Return a read-only view of the exposed units."""
        exposed = self.exposed_units
        return CheckGroupSnapshot(
            state=self.state,
            cursor=self.cursor,
            total_units=len(self.units),
            units=[unit.snapshot(weight=display_weight(len(exposed), i)) for i, unit in enumerate(exposed)],
        )

    def _on_unit_finished(self, unit: CheckUnit) -> None:
        if self._cancelled or unit is not self.active_unit:
            return

        if unit.state == RunState.FAILED:
            logger.error(f"Check group stopped at '{unit.label}': {unit.failure_reason}")
            self._settled.set()
            return

        self.cursor += 1
        next_unit = self.active_unit
        if next_unit is None:
            logger.info("All checks in group succeeded")
            self._settled.set()
            return
        next_unit.start()

    def __str__(self) -> str:
        """String representation of the group."""
        return f"CheckGroup(units={len(self.units)}, cursor={self.cursor})"

    def __repr__(self) -> str:
        """Detailed representation of the group."""
        labels = [unit.label for unit in self.units]
        return f"CheckGroup(units={labels}, cursor={self.cursor}, state={self.state.value})"
