"""
Tests for channel write operations.

Tests cover:
- Create round trip and default channel presets
- Edit patch semantics (changed, no-op, missing)
- Soft delete releasing the slug
- Archive / restore, single and bulk
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from structlog.testing import capture_logs

from community_channels.models.channel import Channel
from community_channels.schemas.channels import ChannelCreate, ChannelEdit
from community_channels.services import channels as channel_service


def channel_in(community, **overrides) -> ChannelCreate:
    data = {
        "community_id": community.id,
        "name": "Random",
        "slug": "random",
        "description": "Anything goes",
        "is_private": False,
    }
    data.update(overrides)
    return ChannelCreate(**data)


class TestCreateChannel:
    """Channel creation."""

    @pytest.mark.asyncio
    async def test_round_trip(self, session, community, user_id):
        created = await channel_service.create_channel(session, channel_in(community), user_id)

        fetched = await channel_service.get_channel_by_id(session, created.id)

        assert fetched is not None
        assert (fetched.name, fetched.slug, fetched.description, fetched.is_private) == (
            "Random",
            "random",
            "Anything goes",
            False,
        )
        assert fetched.created_at is not None
        assert fetched.deleted_at is None
        assert fetched.archived_at is None

    @pytest.mark.asyncio
    async def test_is_default_coerced_to_bool(self, session, community, user_id):
        created = await channel_service.create_channel(
            session, channel_in(community, is_default=None), user_id
        )

        assert created.is_default is False

    @pytest.mark.asyncio
    async def test_logs_creation(self, session, community, user_id):
        with capture_logs() as logs:
            await channel_service.create_channel(session, channel_in(community), user_id)

        assert any(entry["event"] == "channel.created" for entry in logs)

    @pytest.mark.asyncio
    async def test_duplicate_live_slug_rejected(self, session, community, user_id):
        await channel_service.create_channel(session, channel_in(community), user_id)

        with pytest.raises(IntegrityError):
            await channel_service.create_channel(session, channel_in(community), user_id)

    @pytest.mark.asyncio
    async def test_general_preset(self, session, community, user_id):
        channel = await channel_service.create_general_channel(session, community.id, user_id)

        assert channel.name == "General"
        assert channel.slug == "general"
        assert channel.description == "General Chatter"
        assert channel.is_private is False
        assert channel.is_default is True

    @pytest.mark.asyncio
    async def test_off_topic_preset(self, session, community, user_id):
        channel = await channel_service.create_off_topic_channel(session, community.id, user_id)

        assert channel.name == "Off Topic"
        assert channel.slug == "offtopic"
        assert channel.description == "Random banter and off-topic discussions"
        assert channel.is_private is False
        assert channel.is_default is False


class TestEditChannel:
    """Typed patch semantics for edits."""

    @pytest.mark.asyncio
    async def test_applies_changes(self, session, community, user_id):
        channel = await channel_service.create_channel(session, channel_in(community), user_id)

        edited = await channel_service.edit_channel(
            session,
            ChannelEdit(channel_id=channel.id, name="Lounge", slug="lounge", is_private=True),
        )

        assert edited.name == "Lounge"
        assert edited.slug == "lounge"
        assert edited.is_private is True
        assert edited.description == "Anything goes"

    @pytest.mark.asyncio
    async def test_identical_values_are_a_no_op(self, session, community, user_id):
        channel = await channel_service.create_channel(session, channel_in(community), user_id)
        before = channel.model_dump()

        with capture_logs() as logs:
            edited = await channel_service.edit_channel(
                session,
                ChannelEdit(
                    channel_id=channel.id,
                    name="Random",
                    slug="random",
                    description="Anything goes",
                    is_private=False,
                ),
            )

        assert edited.model_dump() == before
        assert not any(entry["event"] == "channel.updated" for entry in logs)

    @pytest.mark.asyncio
    async def test_unset_fields_untouched(self, session, community, user_id):
        channel = await channel_service.create_channel(session, channel_in(community), user_id)

        edited = await channel_service.edit_channel(
            session, ChannelEdit(channel_id=channel.id, description="Updated")
        )

        assert edited.description == "Updated"
        assert edited.name == "Random"
        assert edited.slug == "random"

    @pytest.mark.asyncio
    async def test_missing_channel_returns_none(self, session):
        assert await channel_service.edit_channel(
            session, ChannelEdit(channel_id=uuid.uuid4(), name="Nope")
        ) is None


class TestDeleteChannel:
    """Soft delete behaviour."""

    @pytest.mark.asyncio
    async def test_hidden_but_retained(self, session, community, user_id):
        channel = await channel_service.create_channel(session, channel_in(community), user_id)

        assert await channel_service.delete_channel(session, channel.id) is True

        assert await channel_service.get_channel_by_id(session, channel.id) is None
        assert await channel_service.get_channel_by_slug(session, "random", "x-slug") is None

        row = await session.get(Channel, channel.id)
        assert row is not None
        assert row.deleted_at is not None
        assert row.slug != "random"

    @pytest.mark.asyncio
    async def test_slug_reusable(self, session, community, user_id):
        old = await channel_service.create_channel(session, channel_in(community), user_id)
        await channel_service.delete_channel(session, old.id)

        new = await channel_service.create_channel(session, channel_in(community), user_id)

        assert new.id != old.id
        found = await channel_service.get_channel_by_slug(session, "random", "x-slug")
        assert found.id == new.id

    @pytest.mark.asyncio
    async def test_missing_channel(self, session):
        assert await channel_service.delete_channel(session, uuid.uuid4()) is False


class TestArchive:
    """Archive, restore and bulk archive."""

    @pytest.mark.asyncio
    async def test_archive_then_restore(self, session, community, user_id):
        channel = await channel_service.create_channel(session, channel_in(community), user_id)

        archived = await channel_service.archive_channel(session, channel.id)
        assert archived.archived_at is not None
        assert archived.is_archived

        restored = await channel_service.restore_channel(session, channel.id)
        assert restored.archived_at is None

    @pytest.mark.asyncio
    async def test_restore_unarchived_returns_unchanged(self, session, community, user_id):
        channel = await channel_service.create_channel(session, channel_in(community), user_id)

        restored = await channel_service.restore_channel(session, channel.id)

        assert restored.id == channel.id
        assert restored.archived_at is None

    @pytest.mark.asyncio
    async def test_missing_channel(self, session):
        assert await channel_service.archive_channel(session, uuid.uuid4()) is None
        assert await channel_service.restore_channel(session, uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_archive_all_private(self, session, community, user_id):
        public = await channel_service.create_channel(session, channel_in(community), user_id)
        staff = await channel_service.create_channel(
            session, channel_in(community, slug="staff", is_private=True), user_id
        )
        mods = await channel_service.create_channel(
            session, channel_in(community, slug="mods", is_private=True), user_id
        )

        count = await channel_service.archive_all_private_channels(session, community.id)

        assert count == 2
        assert staff.archived_at is not None
        assert mods.archived_at is not None
        assert public.archived_at is None

    @pytest.mark.asyncio
    async def test_archive_all_private_unknown_community(self, session):
        assert await channel_service.archive_all_private_channels(session, uuid.uuid4()) == 0
