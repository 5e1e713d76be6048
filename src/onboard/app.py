"""Device API application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from onboard.api import api_router
from onboard.configuration import Configuration
from onboard.constants import API_PREFIX
from onboard.exception_handlers import register_exception_handlers
from onboard.settings import Settings
from onboard.system import ActionRunner, ServiceAdvertiser, build_service_info


def _log_server_endpoints_summary(settings: Settings) -> None:
    """Log the server URL and the available endpoints.

    Args:
        settings: Application settings containing host and port
    """
    server_url = f"http://{settings.host}:{settings.port}"
    logger.info(f"Server running at: {server_url}")

    endpoints = [
        ("Configuration", f"{API_PREFIX}/configuration"),
        ("Link Status", f"{API_PREFIX}/status/link"),
        ("DNS Status", f"{API_PREFIX}/status/dns"),
        ("Systemd Status", f"{API_PREFIX}/status/systemd"),
        ("Onboard", f"{API_PREFIX}/onboard"),
        ("Logs", f"{API_PREFIX}/log/{{name}}"),
        ("API Docs", "/docs"),
    ]
    logger.info("Available endpoints:")
    for name, path in endpoints:
        logger.info(f"   {name}: {server_url}{path}")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Handle startup and shutdown events for the device API."""
    settings: Settings = app.state.settings
    configuration: Configuration = app.state.configuration

    device = f" for device '{settings.device_id}'" if settings.device_id else ""
    logger.info(f"Onboard server starting{device} on interface {settings.interface}")
    logger.info(
        f"Serving {len(configuration.values)} values, {len(configuration.checks)} checks "
        f"and {len(app.state.action_runner)} actions"
    )
    _log_server_endpoints_summary(settings)

    advertiser: ServiceAdvertiser | None = None
    if settings.advertise:
        advertiser = ServiceAdvertiser(build_service_info(settings.device_id, settings.ip_address, settings.port))
        await advertiser.start()
    app.state.advertiser = advertiser

    try:
        yield
    finally:
        if advertiser is not None:
            await advertiser.stop()
        logger.info("Onboard server shutting down")


def create_app(settings: Settings, configuration: Configuration, action_runner: ActionRunner | None = None) -> FastAPI:
    """Build the device API.

    Args:
        settings: Application settings
        configuration: Loaded, validated configuration
        action_runner: Runner for the configured actions (default: built from ``configuration``)

    Returns:
        FastAPI: The application, with its collaborators on ``app.state``
    """
    app = FastAPI(
        lifespan=app_lifespan,
        title="Onboard",
        description="Device-side API for onboarding a device onto a network",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.configuration = configuration
    app.state.action_runner = action_runner or ActionRunner(configuration.actions)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    return app
