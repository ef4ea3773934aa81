"""
Channel service: queries and lifecycle operations for community channels.

Handles:
- Reusable statement builders (by community, by ids, threads, members)
- Visibility queries for anonymous viewers and members
- Grouped thread/member counts for dashboards
- Create / edit / archive / restore / soft delete

Every read excludes soft-deleted channels. Missing records resolve to None or
an empty result; database errors propagate to the caller.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

import structlog
from sqlalchemy import Select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from community_channels.models.base import utcnow
from community_channels.models.channel import Channel
from community_channels.models.community import Community
from community_channels.models.thread import Thread
from community_channels.models.user_channel import UserChannel
from community_channels.schemas.channels import (
    ChannelCreate,
    ChannelEdit,
    ChannelLookup,
    ChannelLookupById,
    GroupedCount,
)
from community_channels.services.notifications import send_channel_notification_on_commit

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Statement builders
# ---------------------------------------------------------------------------


def channels_by_communities(*community_ids: uuid.UUID) -> Select:
    return select(Channel).where(
        Channel.community_id.in_(community_ids),
        Channel.deleted_at.is_(None),
    )


def channels_by_ids(*channel_ids: uuid.UUID) -> Select:
    return select(Channel).where(
        Channel.id.in_(channel_ids),
        Channel.deleted_at.is_(None),
    )


def threads_by_channels(*channel_ids: uuid.UUID) -> Select:
    """Live threads belonging to live channels."""
    channels = channels_by_ids(*channel_ids).subquery()
    return (
        select(Thread)
        .join(channels, Thread.channel_id == channels.c.id)
        .where(Thread.deleted_at.is_(None))
    )


def members_by_channels(*channel_ids: uuid.UUID) -> Select:
    """Active memberships (member, not blocked, not pending) of live channels."""
    channels = channels_by_ids(*channel_ids).subquery()
    return (
        select(UserChannel)
        .join(channels, UserChannel.channel_id == channels.c.id)
        .where(
            UserChannel.is_member.is_(True),
            UserChannel.is_blocked.is_(False),
            UserChannel.is_pending.is_(False),
        )
    )


def _count_of(stmt: Select):
    return select(func.count()).select_from(stmt.subquery()).scalar_subquery()


async def _grouped_counts(session: AsyncSession, stmt: Select) -> list[GroupedCount]:
    rows = stmt.subquery()
    result = await session.execute(
        select(rows.c.channel_id, func.count()).group_by(rows.c.channel_id)
    )
    return [GroupedCount(group=channel_id, reduction=n) for channel_id, n in result.all()]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_channels_by_community(
    session: AsyncSession, community_id: uuid.UUID
) -> list[Channel]:
    result = await session.execute(channels_by_communities(community_id))
    return list(result.scalars().all())


async def get_public_channels_by_community(
    session: AsyncSession, community_id: uuid.UUID
) -> list[uuid.UUID]:
    """Ids of public channels, used to scope threads for anonymous viewers."""
    stmt = (
        channels_by_communities(community_id)
        .where(Channel.is_private.is_(False))
        .with_only_columns(Channel.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_channels_by_user_and_community(
    session: AsyncSession, community_id: uuid.UUID, user_id: uuid.UUID
) -> list[uuid.UUID]:
    """Ids of every public channel plus every channel the user belongs to.

    Order is public channels first, then memberships; duplicates are dropped.
    """
    channels = await get_channels_by_community(session, community_id)

    channel_ids = [c.id for c in channels]
    public_ids = [c.id for c in channels if not c.is_private]

    result = await session.execute(
        select(UserChannel.channel_id).where(
            UserChannel.user_id == user_id,
            UserChannel.channel_id.in_(channel_ids),
            UserChannel.is_member.is_(True),
        )
    )
    member_ids = list(result.scalars().all())

    return list(dict.fromkeys(public_ids + member_ids))


async def get_channels_by_user(
    session: AsyncSession, user_id: uuid.UUID
) -> list[Channel]:
    result = await session.execute(
        select(Channel)
        .join(UserChannel, UserChannel.channel_id == Channel.id)
        .where(
            UserChannel.user_id == user_id,
            UserChannel.is_member.is_(True),
            UserChannel.is_blocked.is_(False),
            UserChannel.is_pending.is_(False),
            Channel.deleted_at.is_(None),
        )
    )
    return list(result.scalars().all())


async def get_channel_by_slug(
    session: AsyncSession, slug: str, community_slug: str
) -> Optional[Channel]:
    result = await session.execute(
        select(Channel)
        .join(Community, Community.id == Channel.community_id)
        .where(
            Channel.slug == slug,
            Channel.deleted_at.is_(None),
            Community.slug == community_slug,
        )
    )
    return result.scalars().first()


async def get_channel_by_id(
    session: AsyncSession, channel_id: uuid.UUID
) -> Optional[Channel]:
    result = await session.execute(channels_by_ids(channel_id))
    return result.scalars().first()


async def get_channel(
    session: AsyncSession, lookup: ChannelLookup
) -> Optional[Channel]:
    if isinstance(lookup, ChannelLookupById):
        return await get_channel_by_id(session, lookup.id)
    return await get_channel_by_slug(session, lookup.slug, lookup.community_slug)


async def get_channels(
    session: AsyncSession, channel_ids: Sequence[uuid.UUID]
) -> list[Channel]:
    result = await session.execute(channels_by_ids(*channel_ids))
    return list(result.scalars().all())


async def get_channel_meta_data(
    session: AsyncSession, channel_id: uuid.UUID
) -> tuple[int, int]:
    """(thread_count, member_count) for one channel.

    Both counts are independent subqueries evaluated in a single statement on
    the caller's session, so rows it has flushed but not committed are seen.
    """
    result = await session.execute(
        select(
            _count_of(threads_by_channels(channel_id)),
            _count_of(members_by_channels(channel_id)),
        )
    )
    thread_count, member_count = result.one()
    return thread_count, member_count


async def get_channels_thread_counts(
    session: AsyncSession, channel_ids: Sequence[uuid.UUID]
) -> list[GroupedCount]:
    return await _grouped_counts(session, threads_by_channels(*channel_ids))


async def get_channels_member_counts(
    session: AsyncSession, channel_ids: Sequence[uuid.UUID]
) -> list[GroupedCount]:
    return await _grouped_counts(session, members_by_channels(*channel_ids))


async def get_channel_member_count(
    session: AsyncSession, channel_id: uuid.UUID
) -> int:
    channel = await session.get(Channel, channel_id)
    if channel is None:
        return 0
    return len(channel.members or [])


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_channel(
    session: AsyncSession,
    channel_in: ChannelCreate,
    user_id: uuid.UUID,
) -> Channel:
    channel = Channel(
        community_id=channel_in.community_id,
        created_at=utcnow(),
        name=channel_in.name,
        description=channel_in.description,
        slug=channel_in.slug,
        is_private=channel_in.is_private,
        is_default=bool(channel_in.is_default),
    )
    session.add(channel)
    await session.flush()

    log.info(
        "channel.created",
        channel_id=str(channel.id),
        community_id=str(channel.community_id),
        slug=channel.slug,
        creator=str(user_id),
    )

    # Only public channels are announced, once the insert is committed
    if not channel.is_private:
        send_channel_notification_on_commit(session, channel, user_id)

    return channel


async def create_general_channel(
    session: AsyncSession, community_id: uuid.UUID, user_id: uuid.UUID
) -> Channel:
    return await create_channel(
        session,
        ChannelCreate(
            community_id=community_id,
            name="General",
            slug="general",
            description="General Chatter",
            is_private=False,
            is_default=True,
        ),
        user_id,
    )


async def create_off_topic_channel(
    session: AsyncSession, community_id: uuid.UUID, user_id: uuid.UUID
) -> Channel:
    return await create_channel(
        session,
        ChannelCreate(
            community_id=community_id,
            name="Off Topic",
            slug="offtopic",
            description="Random banter and off-topic discussions",
            is_private=False,
            is_default=False,
        ),
        user_id,
    )


async def edit_channel(
    session: AsyncSession, channel_in: ChannelEdit
) -> Optional[Channel]:
    """Apply a patch; returns None when the channel does not exist.

    Read-modify-write without a version check: a concurrent edit between the
    read and the flush is overwritten.
    """
    channel = await session.get(Channel, channel_in.channel_id)
    if channel is None:
        return None

    data = channel_in.model_dump(
        exclude={"channel_id"}, exclude_unset=True, exclude_none=True
    )
    changed = {key: value for key, value in data.items() if getattr(channel, key) != value}
    if not changed:
        return channel

    for key, value in changed.items():
        setattr(channel, key, value)

    session.add(channel)
    await session.flush()

    log.info("channel.updated", channel_id=str(channel.id), fields=sorted(changed))
    return channel


async def delete_channel(session: AsyncSession, channel_id: uuid.UUID) -> bool:
    """Soft delete: the row is kept, its slug is released for reuse."""
    channel = await session.get(Channel, channel_id)
    if channel is None:
        return False

    old_slug = channel.slug
    channel.deleted_at = utcnow()
    channel.slug = uuid.uuid4().hex
    session.add(channel)
    await session.flush()

    log.info("channel.deleted", channel_id=str(channel_id), released_slug=old_slug)
    return True


async def archive_channel(
    session: AsyncSession, channel_id: uuid.UUID
) -> Optional[Channel]:
    channel = await session.get(Channel, channel_id)
    if channel is None:
        return None

    channel.archived_at = utcnow()
    session.add(channel)
    await session.flush()

    log.info("channel.archived", channel_id=str(channel_id))
    return channel


async def restore_channel(
    session: AsyncSession, channel_id: uuid.UUID
) -> Optional[Channel]:
    channel = await session.get(Channel, channel_id)
    if channel is None:
        return None

    if channel.archived_at is None:
        return channel

    channel.archived_at = None
    session.add(channel)
    await session.flush()

    log.info("channel.restored", channel_id=str(channel_id))
    return channel


async def archive_all_private_channels(
    session: AsyncSession, community_id: uuid.UUID
) -> int:
    """Archive every private channel of a community (e.g. on plan downgrade)."""
    result = await session.execute(
        update(Channel)
        .where(
            Channel.community_id == community_id,
            Channel.is_private.is_(True),
        )
        .values(archived_at=utcnow())
        .execution_options(synchronize_session="evaluate")
    )
    count = result.rowcount

    log.info("channel.private_archived", community_id=str(community_id), count=count)
    return count
