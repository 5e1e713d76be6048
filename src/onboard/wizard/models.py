"""Read-only views of the wizard handed to the presentation layer."""

from enum import StrEnum

from pydantic import BaseModel, Field

from onboard.verification import CheckGroupSnapshot


class SubmissionState(StrEnum):
    """Status of the submission on the terminal submit step."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"  # Values accepted, checks running
    FAILED = "failed"


class FieldSnapshot(BaseModel):
    """One configured field and its current value (masked when secret)."""

    name: str
    description: str = ""
    secret: bool = False
    value: str = ""
    filled: bool = False


class WizardSnapshot(BaseModel):
    """Current step, field values, submission status and checks."""

    model_config = {"use_enum_values": True}

    current_step: str
    steps: list[str] = Field(default_factory=list)
    fields: list[FieldSnapshot] = Field(default_factory=list)
    can_advance: bool = False
    submission: SubmissionState = SubmissionState.IDLE
    submission_error: str | None = None
    checks: CheckGroupSnapshot | None = None
