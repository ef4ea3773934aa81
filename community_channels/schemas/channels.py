from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel


class ChannelCreate(BaseModel):
    community_id: UUID
    name: str
    description: str = ""
    slug: str
    is_private: bool = False
    is_default: Optional[bool] = False


class ChannelEdit(BaseModel):
    """Patch for an existing channel; only explicitly set fields are applied."""

    channel_id: UUID
    name: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[str] = None
    is_private: Optional[bool] = None


class ChannelLookupById(BaseModel):
    id: UUID


class ChannelLookupBySlug(BaseModel):
    slug: str
    community_slug: str


ChannelLookup = Union[ChannelLookupById, ChannelLookupBySlug]


class GroupedCount(BaseModel):
    """Row count for a single channel id."""

    group: UUID
    reduction: int


class ChannelNotification(BaseModel):
    """Payload of the new-channel notification job."""

    channel: dict
    user_id: UUID
