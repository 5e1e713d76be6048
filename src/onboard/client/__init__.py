"""Client side of the device API: transport interfaces and the HTTP transport."""

from .http import HttpTransport
from .protocol import OnboardTransport, StatusTransport

__all__ = ["HttpTransport", "OnboardTransport", "StatusTransport"]
