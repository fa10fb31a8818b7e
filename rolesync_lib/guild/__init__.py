"""Guild module: Discord-side lookups for the role sync.

The `discord.py` gateway lives in `gateway.py` and is imported by the
composition root only.
"""

from .interfaces import GuildGatewayProtocol
from .members import MemberMatcher, normalize_handle
from .role_cache import RoleNameCache

__all__ = [
    "GuildGatewayProtocol",
    "MemberMatcher",
    "normalize_handle",
    "RoleNameCache",
]
