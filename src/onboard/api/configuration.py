"""Configuration endpoint consumed by the wizard."""

from fastapi import APIRouter, Depends

from onboard.configuration import Configuration, WizardConfiguration

from .dependencies import get_configuration

router = APIRouter(tags=["Configuration"])

configuration_dependency = Depends(get_configuration)


@router.get("/configuration", response_model=WizardConfiguration)
async def read_configuration(configuration: Configuration = configuration_dependency) -> WizardConfiguration:
    """Values to collect and checks to run; actions stay on the device."""
    return configuration.wizard_view()
