"""API dependencies for FastAPI endpoints.

Everything an endpoint needs is attached to ``app.state`` by ``create_app``;
these functions hand it to the endpoints.
"""

from fastapi import Request

from onboard.configuration import Configuration
from onboard.settings import Settings
from onboard.system import ActionRunner


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_configuration(request: Request) -> Configuration:
    return request.app.state.configuration


def get_action_runner(request: Request) -> ActionRunner:
    return request.app.state.action_runner
