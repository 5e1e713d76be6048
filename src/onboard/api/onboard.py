"""Submission endpoint: runs the configured actions with the collected values."""

from fastapi import APIRouter, Depends
from loguru import logger

from onboard.exceptions import ActionError, APIError
from onboard.models import OnboardResponse
from onboard.system import ActionRunner

from .dependencies import get_action_runner

router = APIRouter(tags=["Onboard"])

action_runner_dependency = Depends(get_action_runner)


@router.post("/onboard", response_model=OnboardResponse)
async def onboard(values: dict[str, str], runner: ActionRunner = action_runner_dependency) -> OnboardResponse:
    """
    Run every configured action, in order, with the submitted values.

    Returns:
        OnboardResponse: An empty body once all actions succeeded
    """
    logger.info(f"Received onboarding request with {len(values)} values")
    try:
        await runner.run(values)
    except ActionError as e:
        raise APIError("failed to execute action", status_code=500) from e
    return OnboardResponse()
