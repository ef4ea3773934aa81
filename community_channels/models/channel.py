"""Channel model, soft-deleted via deleted_at."""

from datetime import datetime
from typing import List, Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Channel(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "channels"
    __table_args__ = (
        # Slugs are only reserved by live channels
        sa.Index(
            "uq_channels_community_id_slug_live",
            "community_id",
            "slug",
            unique=True,
            postgresql_where=sa.text("deleted_at IS NULL"),
            sqlite_where=sa.text("deleted_at IS NULL"),
        ),
    )

    community_id: uuid.UUID = Field(foreign_key="communities.id", nullable=False, index=True)
    name: str = Field(nullable=False)
    description: str = Field(default="", nullable=False)
    slug: str = Field(nullable=False)
    is_private: bool = Field(default=False, nullable=False)
    is_default: bool = Field(default=False, nullable=False)
    members: List[str] = Field(
        default_factory=list,
        sa_column=sa.Column(sa.JSON, nullable=False, server_default="[]"),
    )
    archived_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    deleted_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None
