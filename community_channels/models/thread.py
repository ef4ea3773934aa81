"""Thread model (child of a channel)."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Thread(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "threads"

    channel_id: uuid.UUID = Field(foreign_key="channels.id", nullable=False, index=True)
    community_id: uuid.UUID = Field(foreign_key="communities.id", nullable=False, index=True)
    creator_id: uuid.UUID = Field(nullable=False, index=True)
    title: str = Field(nullable=False)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
