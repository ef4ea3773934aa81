"""Community model (parent of channels)."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Community(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "communities"

    name: str = Field(nullable=False)
    slug: str = Field(nullable=False, unique=True, index=True)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
