"""Bounded polling of probes.

A probe answers "has condition C become true right now?". Most conditions
checked during onboarding are eventually consistent (the link comes up, DHCP
hands out an address, a unit finishes starting), so a single negative answer
means "not ready yet". The BoundedPoller turns such a probe into a single
awaitable with a bounded number of attempts.

Rules:
- A truthy answer ends polling immediately.
- A falsy answer is retried after ``policy.interval`` seconds until
  ``policy.max_attempts`` attempts were made, then ``RetryExhausted`` is raised.
- An exception raised by the probe is propagated at once and never retried.
- Cancelling the awaiting task while it waits between attempts raises
  ``asyncio.CancelledError`` out of the wait; the probe is not called again.
"""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_result, stop_after_attempt, wait_fixed

from onboard.exceptions import RetryExhausted

from .models import RetryPolicy

Probe = Callable[[], Awaitable[bool]]
Sleep = Callable[[float], Awaitable[None]]


def _not_ready(result: bool) -> bool:
    return not result


class BoundedPoller:
    """Runs a probe under a RetryPolicy.

    The poller holds no per-run state, so one instance can serve every check
    unit of a group. The ``sleep`` coroutine is injectable so that tests can
    observe the delays without waiting for them.
    """

    def __init__(self, sleep: Sleep = asyncio.sleep):
        """Initialize the poller.

        Args:
            sleep: Coroutine function used to wait between attempts
        """
        self._sleep = sleep

    async def run(self, probe: Probe, policy: RetryPolicy, label: str = "check") -> bool:
        """Poll ``probe`` until it reports ready or the attempt budget is spent.

        Args:
            probe: Coroutine function returning True once the condition holds
            policy: Attempt budget and inter-attempt delay
            label: Name used in log messages

        Returns:
            bool: Always True; every other outcome is raised

        Raises:
            RetryExhausted: If the probe never reported ready
            Exception: Whatever the probe raised, unchanged
        """

        def log_retry(retry_state: RetryCallState) -> None:
            logger.debug(
                f"Check '{label}' not ready after attempt {retry_state.attempt_number}/{policy.max_attempts}, "
                f"retrying in {policy.interval}s"
            )

        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(policy.max_attempts),
            wait=wait_fixed(policy.interval),
            retry=retry_if_result(_not_ready),
            before_sleep=log_retry,
        )

        try:
            await retrying(probe)
        except RetryError as e:
            logger.warning(f"Check '{label}' timed out after {policy.max_attempts} attempts")
            raise RetryExhausted(policy.max_attempts) from e

        return True
