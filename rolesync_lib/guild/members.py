"""Match membership records to guild members by Discord username."""
from __future__ import annotations
from typing import Any, Optional
import logging

from rolesync_lib.guild.interfaces import GuildGatewayProtocol
from rolesync_lib.notion.properties import MembershipRecord
from rolesync_lib.util import Throttle

logger = logging.getLogger(__name__)


def normalize_handle(handle: str) -> str:
    return handle.strip().lstrip("@").strip().casefold()


class MemberMatcher:
    def __init__(self, gateway: GuildGatewayProtocol, throttle: Throttle):
        self._gateway = gateway
        self._throttle = throttle

    async def match(self, record: MembershipRecord) -> Optional[Any]:
        """Return the guild member for `record`, or None when unlinked or absent.

        The cached roster is checked first; a remote search only runs on a
        miss and its first result must match the username exactly.
        """
        username = normalize_handle(record.discord_username or "")
        if not username:
            logger.warning("User with page url %s has no discord.", record.url)
            return None

        for member in self._gateway.cached_members():
            if member.name.casefold() == username:
                return member

        results = await self._gateway.search_members(username, limit=1)
        await self._throttle.wait()
        if not results or results[0].name.casefold() != username:
            logger.warning("Could not find member: %s", username)
            return None
        return results[0]
