"""User-Channel membership (join table)."""

import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class UserChannel(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "users_channels"

    user_id: uuid.UUID = Field(nullable=False, index=True)
    channel_id: uuid.UUID = Field(foreign_key="channels.id", nullable=False, index=True)
    is_member: bool = Field(default=False, nullable=False)
    is_blocked: bool = Field(default=False, nullable=False)
    is_pending: bool = Field(default=False, nullable=False)
    is_owner: bool = Field(default=False, nullable=False)
    is_moderator: bool = Field(default=False, nullable=False)
    receive_notifications: bool = Field(default=True, nullable=False)
