"""
Create a community (if missing) together with its default channels.
"""

import argparse
import asyncio
import uuid

import structlog
from sqlmodel import select

from community_channels.core.config import get_settings
from community_channels.core.database import get_session_context, init_db
from community_channels.core.lifecycle import shutdown
from community_channels.core.logging_config import configure_logging
from community_channels.models.community import Community
from community_channels.services import channels as channel_service

log = structlog.get_logger()


async def bootstrap_community(
    slug: str, name: str, owner_id: uuid.UUID, create_tables: bool = False
) -> Community:
    if create_tables:
        await init_db()

    async with get_session_context() as session:
        result = await session.execute(select(Community).where(Community.slug == slug))
        community = result.scalar_one_or_none()

        if not community:
            community = Community(name=name, slug=slug)
            session.add(community)
            await session.flush()
            log.info("community.created", community_id=str(community.id), slug=slug)

        existing = {
            c.slug for c in await channel_service.get_channels_by_community(session, community.id)
        }
        if "general" not in existing:
            await channel_service.create_general_channel(session, community.id, owner_id)
        if "offtopic" not in existing:
            await channel_service.create_off_topic_channel(session, community.id, owner_id)

    return community


async def main(args: argparse.Namespace) -> None:
    try:
        await bootstrap_community(args.slug, args.name or args.slug, args.owner_id, args.create_tables)
    finally:
        await shutdown()


def run() -> None:
    parser = argparse.ArgumentParser(description="Create a community and its default channels.")
    parser.add_argument("--slug", required=True, help="Community slug")
    parser.add_argument("--name", help="Community display name (defaults to the slug)")
    parser.add_argument("--owner-id", required=True, type=uuid.UUID, help="User id credited as channel creator")
    parser.add_argument("--create-tables", action="store_true", help="Create tables first (development only)")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    asyncio.run(main(args))


if __name__ == "__main__":
    run()
