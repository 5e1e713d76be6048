"""Onboarding checks: probe adapters and the check list run after submission."""

from .check_list import add_configured_checks, add_network_checks, build_onboarding_checks
from .probes import address_assigned_probe, dns_probe, link_up_probe, service_probe

__all__ = [
    "add_configured_checks",
    "add_network_checks",
    "build_onboarding_checks",
    "address_assigned_probe",
    "dns_probe",
    "link_up_probe",
    "service_probe",
]
