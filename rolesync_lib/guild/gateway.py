"""Guild gateway backed by `discord.py`."""
from __future__ import annotations
from typing import AsyncIterator, List, Sequence
import logging

import discord

logger = logging.getLogger(__name__)

AUDIT_REASON = "Role sync from members database"


class DiscordGuildGateway:
    """Expose the guild operations used by the role sync.

    The client must be logged in and ready; the guild comes from the
    client's cache so roles and the member roster are populated.
    """

    def __init__(self, client: discord.Client, guild: discord.Guild):
        self._client = client
        self._guild = guild

    @property
    def guild(self) -> discord.Guild:
        return self._guild

    def roles(self) -> Sequence[discord.Role]:
        return list(self._guild.roles)

    def cached_members(self) -> Sequence[discord.Member]:
        return list(self._guild.members)

    def member_roles(self, member: discord.Member) -> List[discord.Role]:
        return [role for role in member.roles if not role.is_default()]

    async def search_members(self, query: str, limit: int = 1) -> List[discord.Member]:
        return await self._guild.query_members(query=query, limit=limit)

    async def iter_members(self) -> AsyncIterator[discord.Member]:
        async for member in self._guild.fetch_members(limit=None):
            yield member

    async def bot_member(self) -> discord.Member:
        if self._client.user is None:
            raise RuntimeError("Discord client is not logged in")
        return await self._guild.fetch_member(self._client.user.id)

    async def replace_roles(self, member: discord.Member, roles: Sequence[discord.Role]) -> None:
        # @everyone is implicit and cannot be sent in a role list
        assignable = [role for role in roles if not role.is_default()]
        logger.debug("Replacing roles of %s with %d roles", member, len(assignable))
        await member.edit(roles=assignable, reason=AUDIT_REASON)

    async def grant_role(self, member: discord.Member, role: discord.Role) -> None:
        await member.add_roles(role, reason=AUDIT_REASON)
