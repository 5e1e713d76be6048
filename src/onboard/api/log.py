"""Server-sent event streams of the network services' journal records."""

from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from loguru import logger

from onboard.exceptions import APIError, CommandError
from onboard.settings import Settings
from onboard.system import follow_journal, log_matchers

from .dependencies import get_app_settings

router = APIRouter(tags=["Log"])

settings_dependency = Depends(get_app_settings)

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


async def journal_events(matchers: list[str]) -> AsyncIterator[str]:
    """Wrap each journal record in a server-sent ``data:`` event."""
    try:
        async for line in follow_journal(matchers):
            yield f"data: {line}\n\n"
    except CommandError as e:
        logger.error(f"Journal stream ended: {e}")


@router.get("/log/{name}")
async def follow_log(name: str, settings: Settings = settings_dependency) -> StreamingResponse:
    """
    Follow the journal of ``systemd-networkd`` or ``wpa_supplicant``.

    Each event carries one JSON journal record with at least ``MESSAGE``.
    """
    matchers = log_matchers(name, settings.interface)
    if matchers is None:
        raise APIError(f"unknown log {name!r}", status_code=404)
    logger.info(f"Streaming log '{name}' for {settings.interface}")
    return StreamingResponse(journal_events(matchers), media_type="text/event-stream", headers=SSE_HEADERS)
