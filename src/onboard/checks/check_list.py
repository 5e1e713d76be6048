"""Onboarding check list construction.

Builds the ordered CheckGroup run after a successful submission:

1. Bringing up the network (link state "up")
2. Getting an IP address (at least one address on the link)
3. The checks declared in the configuration, in configuration order
4. A terminal "Done" confirmation
"""

from collections.abc import Mapping

from loguru import logger

from onboard.client.protocol import StatusTransport
from onboard.configuration import Check, Configuration, WizardConfiguration
from onboard.constants import ADDRESS_CHECK_LABEL, DNS_CHECK_LABEL, DONE_CHECK_LABEL, NETWORK_CHECK_LABEL
from onboard.settings import Settings
from onboard.verification import BoundedPoller, CheckGroup, CheckGroupBuilder, RetryPolicy

from .probes import address_assigned_probe, dns_probe, link_up_probe, service_probe


def add_network_checks(builder: CheckGroupBuilder, transport: StatusTransport) -> CheckGroupBuilder:
    """Add the link and address checks every onboarding starts with.

    Args:
        builder: Group builder to add the checks to
        transport: Status transport the probes query

    Returns:
        Builder with the network checks added (for chaining)
    """
    (
        builder.add_check(NETWORK_CHECK_LABEL, link_up_probe(transport, tolerate_connection_errors=True))
        .add_check(ADDRESS_CHECK_LABEL, address_assigned_probe(transport))
    )
    return builder


def add_configured_checks(
    builder: CheckGroupBuilder,
    checks: list[Check],
    values: Mapping[str, str],
    transport: StatusTransport,
    service_policy: RetryPolicy,
) -> CheckGroupBuilder:
    """Add one check per configured DNS or systemd check, in order.

    Args:
        builder: Group builder to add the checks to
        checks: Checks declared in the configuration
        values: Submitted values by name
        transport: Status transport the probes query
        service_policy: Attempt budget for systemd unit checks

    Returns:
        Builder with the configured checks added (for chaining)
    """
    for check in checks:
        if check.dns is not None:
            if check.dns.value not in values:
                logger.warning(f"Check '{check.name}' refers to unknown value '{check.dns.value}', skipping")
                continue
            builder.add_check(DNS_CHECK_LABEL, dns_probe(transport, values[check.dns.value]))
        elif check.systemd is not None:
            label = check.systemd.description or check.description or check.systemd.unit
            builder.add_check(label, service_probe(transport, check.systemd.unit), service_policy)
    return builder


def build_onboarding_checks(
    configuration: Configuration | WizardConfiguration,
    values: Mapping[str, str],
    transport: StatusTransport,
    settings: Settings,
    poller: BoundedPoller | None = None,
) -> CheckGroup:
    """Build the check group verifying a submitted onboarding.

    Args:
        configuration: Configuration, or the wizard view of it, providing the checks
        values: Submitted values by name
        transport: Status transport the probes query
        settings: Settings providing the attempt budgets
        poller: Poller shared by all units (default: a new BoundedPoller)

    Returns:
        CheckGroup: Not yet started group of checks
    """
    builder = CheckGroupBuilder(
        default_policy=RetryPolicy(max_attempts=settings.check_max_attempts, interval=settings.check_interval),
        poller=poller,
    )
    service_policy = RetryPolicy(max_attempts=settings.service_check_max_attempts, interval=settings.check_interval)

    add_network_checks(builder, transport)
    add_configured_checks(builder, configuration.checks, values, transport, service_policy)
    builder.add_confirmation(DONE_CHECK_LABEL)

    logger.debug(f"Built onboarding checks: {builder.get_labels()}")
    return builder.build()
