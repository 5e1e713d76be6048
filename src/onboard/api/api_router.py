"""API router initialization."""

from fastapi import APIRouter
from loguru import logger

from .configuration import router as configuration_router
from .log import router as log_router
from .onboard import router as onboard_router
from .status import router as status_router

# Create main API router
router = APIRouter()

# Mount API endpoints
router.include_router(configuration_router)
router.include_router(status_router)
router.include_router(onboard_router)
router.include_router(log_router)

logger.debug("API router initialized (configuration, status, onboard, log routers mounted)")
