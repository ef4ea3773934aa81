"""Row builders for threads and memberships used across tests."""

import uuid

from community_channels.models.channel import Channel
from community_channels.models.thread import Thread
from community_channels.models.user_channel import UserChannel


async def add_thread(session, channel: Channel, deleted: bool = False) -> Thread:
    thread = Thread(
        channel_id=channel.id,
        community_id=channel.community_id,
        creator_id=uuid.uuid4(),
        title="thread",
    )
    if deleted:
        thread.deleted_at = thread.created_at
    session.add(thread)
    await session.flush()
    return thread


async def add_membership(
    session,
    channel: Channel,
    user_id: uuid.UUID | None = None,
    *,
    is_member: bool = True,
    is_blocked: bool = False,
    is_pending: bool = False,
) -> UserChannel:
    membership = UserChannel(
        user_id=user_id or uuid.uuid4(),
        channel_id=channel.id,
        is_member=is_member,
        is_blocked=is_blocked,
        is_pending=is_pending,
    )
    session.add(membership)
    await session.flush()
    return membership
