"""Wizard state: linear collection of configured values followed by submission.

Steps run ``start -> <field 0> -> ... -> <field n-1> -> submit``. Moving
forward from a field requires a non-empty value; moving back is always
allowed. On the submit step an explicit ``submit()`` hands the values to the
submit collaborator and, once they are accepted, builds and starts a fresh
CheckGroup. Leaving the submit step discards that group.
"""

from collections.abc import Awaitable, Callable

from loguru import logger

from onboard.configuration import Value
from onboard.constants import START_STEP, SUBMIT_STEP
from onboard.exceptions import SubmissionError
from onboard.verification import CheckGroup

from .models import FieldSnapshot, SubmissionState, WizardSnapshot

Submitter = Callable[[dict[str, str]], Awaitable[None]]
CheckGroupFactory = Callable[[dict[str, str]], CheckGroup]

SECRET_MASK = "*"


class WizardState:
    """Linear step machine over the configured fields.

    The value cells are created once, one per configured field, when the
    wizard is built; they are only ever indexed afterwards.

    Attributes:
        fields: Field definitions in step order
        submission: Status of the submission
        submission_error: Message of the last rejected submission
        check_group: Checks started by the last accepted submission
    """

    def __init__(self, fields: list[Value], submitter: Submitter, check_group_factory: CheckGroupFactory):
        """Initialize the wizard on its start step.

        Args:
            fields: Values to collect, in order
            submitter: Coroutine function submitting the collected values;
                raises SubmissionError when they are rejected
            check_group_factory: Builds the checks for accepted values
        """
        self.fields: tuple[Value, ...] = tuple(fields)
        self._values: list[str] = [""] * len(self.fields)
        self._submitter = submitter
        self._check_group_factory = check_group_factory
        self._position = -1  # -1 is the start step, len(fields) the submit step
        self._visit = 0  # bumped on every step change, used to drop stale submissions
        self._in_flight = False  # survives leaving the submit step, unlike ``submission``
        self.submission = SubmissionState.IDLE
        self.submission_error: str | None = None
        self.check_group: CheckGroup | None = None

    @property
    def steps(self) -> list[str]:
        """All step ids in order."""
        return [START_STEP, *(field.name for field in self.fields), SUBMIT_STEP]

    @property
    def current_step(self) -> str:
        """Id of the current step."""
        return self.steps[self._position + 1]

    @property
    def on_submit_step(self) -> bool:
        return self._position == len(self.fields)

    @property
    def can_advance(self) -> bool:
        """Whether moving to the next step is allowed right now."""
        if self.on_submit_step:
            return False
        if self._position < 0:
            return True
        return self._values[self._position] != ""

    def value(self, index: int) -> str:
        """Return the value collected for the field at ``index``."""
        return self._values[index]

    def set_field_value(self, index: int, value: str) -> None:
        """Store the operator's input for the field at ``index``.

        Raises:
            IndexError: If there is no field at ``index``
        """
        if not 0 <= index < len(self.fields):
            raise IndexError(f"no field at index {index}")
        self._values[index] = value

    def payload(self) -> dict[str, str]:
        """Return the collected values by field name."""
        return {field.name: value for field, value in zip(self.fields, self._values, strict=True)}

    def navigate(self, step_id: str) -> bool:
        """Move to an adjacent step.

        Args:
            step_id: Id of the target step

        Returns:
            True if the wizard is now on ``step_id``, False if the move was rejected

        Raises:
            ValueError: If ``step_id`` is not a step of this wizard
        """
        steps = self.steps
        if step_id not in steps:
            raise ValueError(f"unknown step: {step_id}")

        target = steps.index(step_id) - 1
        if target == self._position:
            return True
        if target == self._position + 1:
            if not self.can_advance:
                logger.debug(f"Cannot leave step '{self.current_step}' while its value is empty")
                return False
        elif target != self._position - 1:
            logger.debug(f"Cannot jump from step '{self.current_step}' to '{step_id}'")
            return False

        if self.on_submit_step:
            self._leave_submit_step()
        self._position = target
        self._visit += 1
        logger.trace(f"Wizard moved to step '{step_id}'")
        return True

    def advance(self) -> bool:
        """Move to the next step if allowed."""
        if self.on_submit_step:
            return False
        return self.navigate(self.steps[self._position + 2])

    def back(self) -> bool:
        """Move to the previous step."""
        if self._position < 0:
            return False
        return self.navigate(self.steps[self._position])

    async def submit(self) -> bool:
        """Submit the collected values and start the checks.

        Ignored unless on the submit step, while a submission is in flight,
        and after a submission was accepted.

        Returns:
            True if the values were accepted and the checks started
        """
        if not self.on_submit_step:
            logger.debug("Ignoring submit outside of the submit step")
            return False
        if self._in_flight:
            logger.debug("Ignoring submit while a submission is in flight")
            return False
        if self.submission == SubmissionState.SUCCEEDED:
            logger.debug("Ignoring submit after the values were accepted")
            return False

        visit = self._visit
        payload = self.payload()
        self.submission = SubmissionState.IN_FLIGHT
        self.submission_error = None
        logger.info(f"Submitting {len(payload)} values")

        self._in_flight = True
        try:
            await self._submitter(payload)
        except SubmissionError as e:
            logger.error(f"Submission failed: {e}")
            self._fail_submission(visit, str(e))
            return False
        except Exception as e:
            logger.exception(f"Submission failed unexpectedly: {e}")
            self._fail_submission(visit, str(e) or type(e).__name__)
            return False
        finally:
            self._in_flight = False

        if visit != self._visit:
            logger.warning("Discarding submission result, the wizard left the submit step")
            return False

        self.submission = SubmissionState.SUCCEEDED
        self.check_group = self._check_group_factory(payload)
        self.check_group.start()
        return True

    def snapshot(self) -> WizardSnapshot:
        """Return a read-only view of the wizard."""
        return WizardSnapshot(
            current_step=self.current_step,
            steps=self.steps,
            fields=[
                FieldSnapshot(
                    name=field.name,
                    description=field.description,
                    secret=field.secret,
                    value=SECRET_MASK * len(value) if field.secret else value,
                    filled=value != "",
                )
                for field, value in zip(self.fields, self._values, strict=True)
            ],
            can_advance=self.can_advance,
            submission=self.submission,
            submission_error=self.submission_error,
            checks=self.check_group.snapshot() if self.check_group is not None else None,
        )

    def _fail_submission(self, visit: int, message: str) -> None:
        if visit == self._visit:
            self.submission = SubmissionState.FAILED
            self.submission_error = message

    def _leave_submit_step(self) -> None:
        if self.check_group is not None:
            self.check_group.cancel()
            self.check_group = None
        self.submission = SubmissionState.IDLE
        self.submission_error = None

    def __str__(self) -> str:
        """String representation of the wizard."""
        return f"WizardState(step='{self.current_step}', fields={len(self.fields)})"
