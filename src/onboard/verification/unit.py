"""Check units: a labelled probe with its own observable run state.

A CheckUnit runs exactly once. ``start`` moves it from NOT_STARTED to RUNNING
and schedules its BoundedPoller on the running event loop; the poller's
outcome moves it to SUCCEEDED or FAILED. A failed unit is never restarted, the
only way to check again is to build a new unit.
"""

import asyncio
from collections.abc import Callable

import arrow
from loguru import logger

from .enums import RunState
from .models import CheckUnitSnapshot, RetryPolicy
from .poller import BoundedPoller, Probe

UnitListener = Callable[["CheckUnit"], None]


class CheckUnit:
    """A named, stateful wrapper around one BoundedPoller run.

    Attributes:
        label: Human-readable name shown to the operator
        probe: Coroutine function answering whether the condition holds
        policy: Attempt budget for the probe
    """

    def __init__(
        self,
        label: str,
        probe: Probe,
        policy: RetryPolicy | None = None,
        poller: BoundedPoller | None = None,
    ):
        """Initialize the check unit.

        Args:
            label: Human-readable name of the check
            probe: Coroutine function answering whether the condition holds
            policy: Attempt budget (default: RetryPolicy defaults)
            poller: Poller running the probe (default: a new BoundedPoller)
        """
        self.label = label
        self.probe = probe
        self.policy = policy or RetryPolicy()
        self._poller = poller or BoundedPoller()
        self._state = RunState.NOT_STARTED
        self._failure_reason: str | None = None
        self._attempts = 0
        self._started_at: str | None = None
        self._finished_at: str | None = None
        self._task: asyncio.Task | None = None
        self._cancelled = False
        self._listeners: list[UnitListener] = []

    @property
    def state(self) -> RunState:
        """Current run state."""
        return self._state

    @property
    def failure_reason(self) -> str | None:
        """Why the unit failed; None unless the state is FAILED."""
        return self._failure_reason

    @property
    def attempts(self) -> int:
        """Number of times the probe has been invoked."""
        return self._attempts

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_listener(self, listener: UnitListener) -> None:
        """Register a callback invoked once the unit succeeded or failed.

        Args:
            listener: Called with this unit after the terminal transition
        """
        self._listeners.append(listener)

    def start(self) -> asyncio.Task | None:
        """Start polling the probe.

        Must be called from within a running event loop. Calling it on a unit
        that already left NOT_STARTED does nothing.

        Returns:
            The task running the poller, or None if the unit was already started
        """
        if self._state != RunState.NOT_STARTED:
            logger.trace(f"Check '{self.label}' already {self._state.value}, not starting again")
            return None

        self._state = RunState.RUNNING
        self._started_at = arrow.utcnow().isoformat()
        logger.info(f"Running check: {self.label}")
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"check:{self.label}")
        return self._task

    async def wait(self) -> RunState:
        """Wait until the started unit reached a terminal state.

        Returns:
            RunState: The final state

        Raises:
            RuntimeError: If the unit was never started
            asyncio.CancelledError: If the unit was cancelled
        """
        if self._task is None:
            raise RuntimeError(f"Check '{self.label}' has not been started")
        await self._task
        return self._state

    def cancel(self) -> bool:
        """Abandon an in-flight run.

        The pending probe or delay is cancelled, the probe is not invoked
        again and the unit never reaches a terminal state.

        Returns:
            True if a running task was cancelled
        """
        if self._task is None or self._task.done():
            return False
        self._cancelled = True
        logger.debug(f"Cancelling check: {self.label}")
        return self._task.cancel()

    def snapshot(self, weight: float = 1.0) -> CheckUnitSnapshot:
        """Return a read-only view of the unit.

        Args:
            weight: Display weight assigned by the owning group
        """
        return CheckUnitSnapshot(
            label=self.label,
            state=self._state,
            failure_reason=self._failure_reason,
            attempts=self._attempts,
            max_attempts=self.policy.max_attempts,
            started_at=self._started_at,
            finished_at=self._finished_at,
            weight=weight,
        )

    async def _attempt(self) -> bool:
        self._attempts += 1
        return await self.probe()

    async def _run(self) -> None:
        try:
            await self._poller.run(self._attempt, self.policy, self.label)
        except Exception as e:
            self._finish(RunState.FAILED, str(e) or type(e).__name__)
            return
        self._finish(RunState.SUCCEEDED)

    def _finish(self, state: RunState, reason: str | None = None) -> None:
        self._state = state
        self._failure_reason = reason
        self._finished_at = arrow.utcnow().isoformat()

        if state == RunState.SUCCEEDED:
            logger.info(f"Check '{self.label}' succeeded after {self._attempts} attempt(s)")
        else:
            logger.warning(f"Check '{self.label}' failed after {self._attempts} attempt(s): {reason}")

        for listener in self._listeners:
            listener(self)

    def __str__(self) -> str:
        """String representation of the unit."""
        return f"CheckUnit(label='{self.label}', state={self._state.value})"

    def __repr__(self) -> str:
        """Detailed representation of the unit."""
        return (
            f"CheckUnit(label='{self.label}', state={self._state.value}, "
            f"attempts={self._attempts}/{self.policy.max_attempts}, interval={self.policy.interval})"
        )
