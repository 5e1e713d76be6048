"""Tests for the onboarding check list."""

import pytest

from onboard.checks import build_onboarding_checks
from onboard.configuration import Check, Configuration, DNSCheck, SystemdCheck, Value
from onboard.constants import ADDRESS_CHECK_LABEL, DNS_CHECK_LABEL, DONE_CHECK_LABEL, NETWORK_CHECK_LABEL
from onboard.exceptions import ProbeConnectionError, ProbeTransportError
from onboard.models import LinkStatus, SystemdStatus
from onboard.settings import Settings
from onboard.verification import GroupState, RunState


def make_configuration(*checks: Check) -> Configuration:
    return Configuration(values=[Value(name="endpoint"), Value(name="ssid")], checks=list(checks))


class TestBuildOnboardingChecks:
    """Test cases for build_onboarding_checks."""

    @pytest.mark.asyncio
    async def test_network_checks_then_done(self, transport, settings, poller, recording_sleep):
        """Without configured checks the group is link, address, Done."""
        group = build_onboarding_checks(make_configuration(), {}, transport, settings, poller)

        snapshot = await group.run()

        assert [unit.label for unit in snapshot.units] == [NETWORK_CHECK_LABEL, ADDRESS_CHECK_LABEL, DONE_CHECK_LABEL]
        assert snapshot.state == GroupState.SUCCEEDED
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_waits_for_device_to_come_up(self, transport, settings, poller, recording_sleep):
        transport.link_responses = [
            ProbeConnectionError("connection refused"),
            LinkStatus(state="down"),
            LinkStatus(state="up"),
            LinkStatus(state="up", addresses=[]),
            LinkStatus(state="up", addresses=["192.168.1.20/24"]),
        ]
        group = build_onboarding_checks(make_configuration(), {}, transport, settings, poller)

        snapshot = await group.run()

        assert snapshot.state == GroupState.SUCCEEDED
        assert [unit.attempts for unit in snapshot.units] == [3, 2, 1]
        assert recording_sleep.delays == [5.0, 5.0, 5.0]

    @pytest.mark.asyncio
    async def test_dns_failure_stops_group(self, transport, settings, poller):
        """A rejected DNS lookup fails its unit on the first attempt."""
        transport.dns_responses = [ProbeTransportError("not found")]
        configuration = make_configuration(
            Check(name="dns", dns=DNSCheck(value="endpoint")),
            Check(name="join", systemd=SystemdCheck(unit="join.service")),
        )

        group = build_onboarding_checks(configuration, {"endpoint": "example.com"}, transport, settings, poller)
        snapshot = await group.run()

        assert snapshot.state == GroupState.FAILED
        assert [unit.label for unit in snapshot.units] == [NETWORK_CHECK_LABEL, ADDRESS_CHECK_LABEL, DNS_CHECK_LABEL]
        failed = snapshot.units[-1]
        assert failed.state == RunState.FAILED
        assert failed.failure_reason == "not found"
        assert failed.attempts == 1
        assert ("dns", "example.com") in transport.calls
        assert not any(call[0] == "systemd" for call in transport.calls)

    @pytest.mark.asyncio
    async def test_service_check_uses_larger_budget(self, transport, settings, poller, recording_sleep):
        """A unit that finishes on the 10th poll still succeeds."""
        transport.systemd_responses = [SystemdStatus(result="", sub_state="start")] * 9 + [
            SystemdStatus(result="success", sub_state="dead")
        ]
        configuration = make_configuration(
            Check(name="join", systemd=SystemdCheck(unit="join.service", description="Joining cluster"))
        )

        group = build_onboarding_checks(configuration, {}, transport, settings, poller)
        snapshot = await group.run()

        assert snapshot.state == GroupState.SUCCEEDED
        service = group.units[2]
        assert service.label == "Joining cluster"
        assert service.attempts == 10
        assert service.policy.max_attempts == 20
        assert len(recording_sleep.delays) == 9

    @pytest.mark.asyncio
    async def test_service_check_succeeds_on_last_attempt(self, transport, poller):
        settings = Settings(_env_file=None, check_interval=0, service_check_max_attempts=10)
        transport.systemd_responses = [SystemdStatus(result="", sub_state="start")] * 9 + [
            SystemdStatus(result="success", sub_state="dead")
        ]
        configuration = make_configuration(Check(name="join", systemd=SystemdCheck(unit="join.service")))

        snapshot = await build_onboarding_checks(configuration, {}, transport, settings, poller).run()

        assert snapshot.state == GroupState.SUCCEEDED
        assert snapshot.units[2].attempts == 10
        assert snapshot.units[2].max_attempts == 10

    @pytest.mark.asyncio
    async def test_service_check_times_out(self, transport, poller):
        settings = Settings(_env_file=None, check_interval=0, service_check_max_attempts=3)
        transport.systemd_responses = [SystemdStatus(result="", sub_state="start")]
        configuration = make_configuration(Check(name="join", systemd=SystemdCheck(unit="join.service")))

        snapshot = await build_onboarding_checks(configuration, {}, transport, settings, poller).run()

        assert snapshot.state == GroupState.FAILED
        assert snapshot.units[-1].label == "join.service"
        assert snapshot.units[-1].failure_reason == "timed out retrying check"
        assert snapshot.units[-1].attempts == 3

    def test_labels_in_configuration_order(self, transport, settings):
        configuration = make_configuration(
            Check(name="join", description="Joining", systemd=SystemdCheck(unit="join.service")),
            Check(name="dns", dns=DNSCheck(value="endpoint")),
        )

        group = build_onboarding_checks(configuration, {"endpoint": "example.com"}, transport, settings)

        assert [unit.label for unit in group.units] == [
            NETWORK_CHECK_LABEL,
            ADDRESS_CHECK_LABEL,
            "Joining",
            DNS_CHECK_LABEL,
            DONE_CHECK_LABEL,
        ]

    def test_skips_dns_check_without_value(self, transport, settings):
        configuration = make_configuration(Check(name="dns", dns=DNSCheck(value="endpoint")))

        group = build_onboarding_checks(configuration, {}, transport, settings)

        assert DNS_CHECK_LABEL not in [unit.label for unit in group.units]
