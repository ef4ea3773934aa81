# SQLModel definitions, imported here to ensure metadata is populated for Alembic.
from .base import UUIDMixin, CreatedAtMixin  # noqa: F401
from .community import Community  # noqa: F401
from .channel import Channel  # noqa: F401
from .thread import Thread  # noqa: F401
from .user_channel import UserChannel  # noqa: F401
