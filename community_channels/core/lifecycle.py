"""Startup/shutdown hooks for processes embedding the channel layer."""

from __future__ import annotations

import structlog

from community_channels.core.config import get_settings
from community_channels.core.database import dispose_engine
from community_channels.core.logging_config import configure_logging
from community_channels.core.queue import close_queue
from community_channels.services.notifications import drain_notifications, pending_count

log = structlog.get_logger()


async def startup() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    log.info("channels.starting", debug=settings.debug)


async def shutdown() -> None:
    log.info("channels.shutting_down", pending_notifications=pending_count())
    await drain_notifications()
    await close_queue()
    await dispose_engine()
