"""Verification engine for onboarding checks.

This module provides the gated check runner used after the wizard submitted
its values:
- A BoundedPoller turns an eventually consistent probe into a single result
- CheckUnits give each probe a label and an observable run state
- A CheckGroup runs units strictly one after another, exposing only the
  prefix up to the active unit

The engine is decoupled from specific probes. Probe adapters and the
onboarding check list are in the checks submodule.
"""

from .builder import CheckGroupBuilder, always_true
from .enums import GroupState, RunState
from .group import CheckGroup, display_weight
from .models import CheckGroupSnapshot, CheckUnitSnapshot, RetryPolicy
from .poller import BoundedPoller, Probe
from .unit import CheckUnit

__all__ = [
    # Core models
    "GroupState",
    "RunState",
    "RetryPolicy",
    "CheckUnitSnapshot",
    "CheckGroupSnapshot",
    # Engine components
    "Probe",
    "BoundedPoller",
    "CheckUnit",
    "CheckGroup",
    "CheckGroupBuilder",
    "always_true",
    "display_weight",
]
