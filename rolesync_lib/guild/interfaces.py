from __future__ import annotations

from typing import Any, AsyncIterator, List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class GuildGatewayProtocol(Protocol):
    """Protocol for the guild operations the role sync performs.

    Roles expose `id`, `name` and `position`; members expose `id`, `name`
    (the username), `display_name` and `roles`.
    """

    def roles(self) -> Sequence[Any]:
        """Return the guild's roles as currently cached."""
        ...

    def cached_members(self) -> Sequence[Any]:
        """Return the in-memory member roster snapshot."""
        ...

    def member_roles(self, member: Any) -> List[Any]:
        """Return the member's roles, excluding the implicit @everyone role."""
        ...

    async def search_members(self, query: str, limit: int = 1) -> List[Any]:
        """Search guild members by username prefix."""
        ...

    def iter_members(self) -> AsyncIterator[Any]:
        """Iterate every guild member from the remote listing."""
        ...

    async def bot_member(self) -> Any:
        """Fetch the bot's own member object, bypassing the cache."""
        ...

    async def replace_roles(self, member: Any, roles: Sequence[Any]) -> None:
        """Replace the member's whole role list in one call."""
        ...

    async def grant_role(self, member: Any, role: Any) -> None:
        ...
