"""Builder for constructing check groups."""

from onboard.verification.group import CheckGroup
from onboard.verification.models import RetryPolicy
from onboard.verification.poller import BoundedPoller, Probe
from onboard.verification.unit import CheckUnit


async def always_true() -> bool:
    """Probe that is ready on the first attempt."""
    return True


class CheckGroupBuilder:
    """Builder for constructing check groups with fluent interface."""

    def __init__(self, default_policy: RetryPolicy | None = None, poller: BoundedPoller | None = None):
        """Initialize the builder.

        Args:
            default_policy: Policy for units added without an explicit one
            poller: Poller shared by every unit of the group
        """
        self.default_policy = default_policy or RetryPolicy()
        self.poller = poller or BoundedPoller()
        self.units: list[CheckUnit] = []

    def add_check(self, label: str, probe: Probe, policy: RetryPolicy | None = None) -> "CheckGroupBuilder":
        """Add a check at the end of the group.

        Args:
            label: Human-readable name of the check
            probe: Coroutine function answering whether the condition holds
            policy: Attempt budget (default: the builder's default policy)

        Returns:
            This builder for method chaining
        """
        self.units.append(CheckUnit(label, probe, policy or self.default_policy, self.poller))
        return self

    def add_confirmation(self, label: str) -> "CheckGroupBuilder":
        """Add a unit that succeeds on its single attempt.

        Used as the terminal visual confirmation that every real check passed.

        Args:
            label: Human-readable name of the confirmation

        Returns:
            This builder for method chaining
        """
        self.units.append(CheckUnit(label, always_true, RetryPolicy.single_attempt(), self.poller))
        return self

    def get_labels(self) -> list[str]:
        """Get labels of all checks added so far."""
        return [unit.label for unit in self.units]

    def build(self) -> CheckGroup:
        """Build the final group.

        Returns:
            CheckGroup over the added units, not yet started
        """
        return CheckGroup(self.units)

    def __str__(self) -> str:
        """String representation of the builder."""
        return f"CheckGroupBuilder(units={len(self.units)})"
