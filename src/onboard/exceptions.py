"""Common exceptions for Onboard.

Verification failures (probe transport errors, exhausted retries), wizard
submission failures and the device-side errors raised while loading the
configuration or running actions.
"""

RETRY_EXHAUSTED_MESSAGE = "timed out retrying check"


class OnboardError(Exception):
    """Base class for all Onboard errors."""


class ProbeTransportError(OnboardError):
    """Raised when a status request could not be completed or was rejected.

    A probe raising this error is not retried: the owning check fails with the
    error message as its reason.
    """


class ProbeConnectionError(ProbeTransportError):
    """Raised when the device API could not be reached at all."""


class RetryExhausted(OnboardError):
    """Raised when a probe kept reporting "not ready" for every allowed attempt."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(RETRY_EXHAUSTED_MESSAGE)


class SubmissionError(OnboardError):
    """Raised when the collected values were rejected on submission."""


class ConfigurationError(OnboardError):
    """Raised when configuration files cannot be read or fail validation.

    All validation problems are collected so that they can be reported at once.
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"configuration contains validation errors: {'; '.join(errors)}")


class CommandError(OnboardError):
    """Raised when an external command (systemctl, journalctl) fails."""

    def __init__(self, command: list[str], message: str):
        self.command = command
        super().__init__(f"{' '.join(command)}: {message}")


class ActionError(OnboardError):
    """Raised when a configured action fails during onboarding."""

    def __init__(self, action_name: str, message: str):
        self.action_name = action_name
        super().__init__(f"action {action_name!r}: {message}")


class LinkNotFoundError(OnboardError):
    """Raised when the configured network interface does not exist."""

    def __init__(self, interface: str):
        self.interface = interface
        super().__init__(f"interface not found: {interface}")


class APIError(OnboardError):
    """Raised by device API endpoints; rendered as ``{"error": message}``."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
