"""
New-channel notifications, handed to the job queue without blocking the caller.

Delivery is at-most-once and best-effort: an enqueue that fails is logged and
dropped, never surfaced to the code that created the channel.
"""

from __future__ import annotations

import asyncio
import uuid

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from community_channels.core.config import get_settings
from community_channels.core.queue import get_queue
from community_channels.models.channel import Channel
from community_channels.schemas.channels import ChannelNotification

settings = get_settings()
log = structlog.get_logger()

# Strong references so in-flight enqueues are not garbage collected
_pending: set[asyncio.Task] = set()

# Session.info keys for notifications waiting on the transaction outcome
_QUEUED_KEY = "channel_notifications"
_HOOKED_KEY = "channel_notifications_hooked"


async def enqueue_channel_notification(notification: ChannelNotification) -> None:
    try:
        queue = await get_queue()
        await queue.enqueue_job(
            settings.notification_job_name,
            channel=notification.channel,
            user_id=str(notification.user_id),
        )
    except Exception as exc:
        log.warning(
            "channel.notification_enqueue_failed",
            channel_id=notification.channel.get("id"),
            user_id=str(notification.user_id),
            error=repr(exc),
        )
        return

    log.info(
        "channel.notification_enqueued",
        channel_id=notification.channel.get("id"),
        user_id=str(notification.user_id),
    )


def _schedule(notification: ChannelNotification) -> asyncio.Task:
    task = asyncio.create_task(enqueue_channel_notification(notification))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


def pending_count() -> int:
    return len(_pending)


async def drain_notifications() -> None:
    """Wait for every scheduled enqueue to finish (used at shutdown)."""
    while _pending:
        await asyncio.gather(*list(_pending))


def _after_commit(session: Session) -> None:
    for notification in session.info.pop(_QUEUED_KEY, []):
        _schedule(notification)


def _after_rollback(session: Session) -> None:
    dropped = session.info.pop(_QUEUED_KEY, [])
    if dropped:
        log.info("channel.notifications_discarded", count=len(dropped))


def send_channel_notification_on_commit(
    session: AsyncSession, channel: Channel, user_id: uuid.UUID
) -> None:
    """Hold the notification until the session commits; a rollback drops it.

    The channel is serialized now, so later changes to the ORM object do not
    leak into the payload.
    """
    sync_session = session.sync_session
    if not sync_session.info.get(_HOOKED_KEY):
        event.listen(sync_session, "after_commit", _after_commit)
        event.listen(sync_session, "after_rollback", _after_rollback)
        sync_session.info[_HOOKED_KEY] = True

    sync_session.info.setdefault(_QUEUED_KEY, []).append(
        ChannelNotification(channel=channel.model_dump(mode="json"), user_id=user_id)
    )
