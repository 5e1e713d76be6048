"""Tests for CheckGroup."""

import asyncio

import pytest

from onboard.exceptions import ProbeTransportError
from onboard.verification import CheckGroup, CheckUnit, GroupState, RetryPolicy, RunState, display_weight


class RecordingProbe:
    """Probe that records the order of calls and the number of concurrent calls."""

    log: list[str]
    running = 0
    max_running = 0

    def __init__(self, name: str, log: list[str], *results: bool, error: str | None = None):
        self.name = name
        self.log = log
        self.results = list(results) or [True]
        self.error = error
        self.calls = 0

    async def __call__(self) -> bool:
        RecordingProbe.running += 1
        RecordingProbe.max_running = max(RecordingProbe.max_running, RecordingProbe.running)
        try:
            self.calls += 1
            self.log.append(self.name)
            await asyncio.sleep(0)
            if self.error is not None:
                raise ProbeTransportError(self.error)
            return self.results[min(self.calls, len(self.results)) - 1]
        finally:
            RecordingProbe.running -= 1


def make_unit(label: str, probe, poller, max_attempts: int = 3) -> CheckUnit:
    return CheckUnit(label, probe, RetryPolicy(max_attempts=max_attempts, interval=1.0), poller)


class TestCheckGroup:
    """Test cases for CheckGroup."""

    @pytest.mark.asyncio
    async def test_runs_units_in_order(self, poller):
        """Every unit runs after its predecessor succeeded."""
        log: list[str] = []
        RecordingProbe.max_running = 0
        group = CheckGroup(
            [
                make_unit("first", RecordingProbe("first", log, False, True), poller),
                make_unit("second", RecordingProbe("second", log), poller),
                make_unit("third", RecordingProbe("third", log, False, False, True), poller),
            ]
        )

        snapshot = await group.run()

        assert snapshot.state == GroupState.SUCCEEDED
        assert snapshot.cursor == 3
        assert log == ["first", "first", "second", "third", "third", "third"]
        assert RecordingProbe.max_running == 1
        assert [unit.label for unit in snapshot.units] == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_failure_stops_progress(self, poller):
        """Units after a failed unit are never started or exposed."""
        log: list[str] = []
        third = RecordingProbe("third", log)
        group = CheckGroup(
            [
                make_unit("first", RecordingProbe("first", log), poller),
                make_unit("second", RecordingProbe("second", log, error="not found"), poller),
                make_unit("third", third, poller),
            ]
        )

        snapshot = await group.run()

        assert snapshot.state == GroupState.FAILED
        assert group.state == GroupState.FAILED
        assert snapshot.cursor == 1
        assert [unit.label for unit in snapshot.units] == ["first", "second"]
        assert snapshot.units[1].failure_reason == "not found"
        assert third.calls == 0
        assert group.units[2].state == RunState.NOT_STARTED

    @pytest.mark.asyncio
    async def test_exposes_prefix_up_to_active_unit(self, poller):
        release = asyncio.Event()

        async def held() -> bool:
            await release.wait()
            return True

        async def ready() -> bool:
            return True

        group = CheckGroup([make_unit("first", held, poller), make_unit("second", ready, poller)])
        assert group.state == GroupState.NOT_STARTED

        group.start()
        await asyncio.sleep(0)
        snapshot = group.snapshot()

        assert snapshot.state == GroupState.RUNNING
        assert snapshot.total_units == 2
        assert [unit.label for unit in snapshot.units] == ["first"]
        assert snapshot.units[0].state == RunState.RUNNING

        release.set()
        assert await group.wait() == GroupState.SUCCEEDED
        assert group.active_unit is None

    @pytest.mark.asyncio
    async def test_empty_group_succeeds(self):
        group = CheckGroup([])

        snapshot = await group.run()

        assert snapshot.state == GroupState.SUCCEEDED
        assert snapshot.units == []

    @pytest.mark.asyncio
    async def test_cancel_stops_active_unit(self):
        probing = asyncio.Event()
        calls = 0

        async def held() -> bool:
            nonlocal calls
            calls += 1
            probing.set()
            await asyncio.Event().wait()
            return True

        async def ready() -> bool:
            return True

        second = CheckUnit("second", ready)
        group = CheckGroup([CheckUnit("first", held), second])
        group.start()
        await probing.wait()

        group.cancel()

        assert await group.wait() == GroupState.CANCELLED
        await asyncio.sleep(0)
        assert calls == 1
        assert second.state == RunState.NOT_STARTED
        assert group.units[0].cancelled is True

    @pytest.mark.asyncio
    async def test_start_twice_is_ignored(self, poller):
        log: list[str] = []
        group = CheckGroup([make_unit("only", RecordingProbe("only", log), poller)])

        group.start()
        group.start()
        await group.wait()

        assert log == ["only"]

    @pytest.mark.asyncio
    async def test_snapshot_weights(self, poller):
        async def ready() -> bool:
            return True

        group = CheckGroup([make_unit(str(i), ready, poller) for i in range(6)])

        snapshot = await group.run()

        assert [unit.weight for unit in snapshot.units] == [0.0, 0.0, 0.25, 0.5, 0.75, 1.0]


class TestDisplayWeight:
    """Test cases for display_weight."""

    @pytest.mark.parametrize(
        "total,position,expected",
        [
            (1, 0, 1.0),
            (2, 1, 1.0),
            (2, 0, 0.75),
            (4, 0, 0.25),
            (5, 0, 0.0),
            (9, 0, 0.0),
        ],
    )
    def test_display_weight(self, total: int, position: int, expected: float):
        assert display_weight(total, position) == expected
