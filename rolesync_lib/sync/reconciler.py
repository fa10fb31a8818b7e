"""Apply the resolved roles of one membership record to its guild member."""
from __future__ import annotations
from typing import Any, List, Optional, Sequence
import logging

from rolesync_lib.guild.interfaces import GuildGatewayProtocol
from rolesync_lib.guild.members import MemberMatcher
from rolesync_lib.notion.properties import MembershipRecord
from rolesync_lib.sync.resolver import RecordResolver
from rolesync_lib.util import Throttle, unique_roles

logger = logging.getLogger(__name__)


def preserved_roles(current: Sequence[Any], highest_position: int) -> List[Any]:
    """Roles at or above the bot's highest role, which the bot may not touch."""
    return [role for role in current if role.position >= highest_position]


class Reconciler:
    def __init__(
        self,
        *,
        gateway: GuildGatewayProtocol,
        matcher: MemberMatcher,
        resolver: RecordResolver,
        throttle: Throttle,
    ):
        self._gateway = gateway
        self._matcher = matcher
        self._resolver = resolver
        self._throttle = throttle

    async def reconcile(self, record: MembershipRecord, dry_run: bool = True) -> Optional[Any]:
        """Bring the member behind `record` to its target roles.

        Returns the matched member (also in dry-run) so sweeps can track who
        was seen, or None when the record has no guild member.
        """
        member = await self._matcher.match(record)
        if member is None:
            return None

        target = await self._resolver.resolve(record)
        logger.info(
            "Roles for %s (%s): %s",
            member.display_name,
            member.name,
            ", ".join(role.name for role in target) or "<none>",
        )

        if dry_run:
            return member

        bot = await self._gateway.bot_member()
        highest = max((role.position for role in bot.roles), default=0)
        current = self._gateway.member_roles(member)
        new_roles = unique_roles([*target, *preserved_roles(current, highest)])

        if {role.id for role in new_roles} == {role.id for role in current}:
            logger.debug("Roles for %s already up to date", member.name)
            return member

        await self._gateway.replace_roles(member, new_roles)
        logger.info("Updated roles for %s (%d roles)", member.name, len(new_roles))
        await self._throttle.wait()
        return member
