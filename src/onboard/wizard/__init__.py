"""Onboard setup wizard: field collection and submission state."""

from .models import FieldSnapshot, SubmissionState, WizardSnapshot
from .state import CheckGroupFactory, Submitter, WizardState

__all__ = [
    "CheckGroupFactory",
    "FieldSnapshot",
    "SubmissionState",
    "Submitter",
    "WizardSnapshot",
    "WizardState",
]
