"""Translate a membership record into the roles it should carry."""
from __future__ import annotations
from typing import Any, List, Optional, Pattern
import logging
import re

from rolesync_lib.guild.role_cache import RoleNameCache
from rolesync_lib.notion.properties import MembershipRecord
from rolesync_lib.notion.team_names import TeamNameResolver
from rolesync_lib.setup import SyncConfig
from rolesync_lib.util import strip_team_suffix, unique_roles

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "Active"
NO_ROLE_POSITION = "Individual Contributor"


class RecordResolver:
    """Compute the target role set for a membership record.

    Roles come from three independent rules: the active status (any value
    other than "Active" names a role), each team relation (team page name
    without its " Team" suffix) and each club position (the technical lead
    role for leadership positions, plus a role named after the position).
    """

    def __init__(self, role_cache: RoleNameCache, team_names: TeamNameResolver, config: SyncConfig):
        self._roles = role_cache
        self._team_names = team_names
        self._technical_lead_role_id = config.technical_lead_role_id
        self._technical_lead_regex: Optional[Pattern[str]] = (
            re.compile(config.technical_lead_pattern) if config.technical_lead_pattern else None
        )

    async def resolve(self, record: MembershipRecord) -> List[Any]:
        roles: List[Any] = []

        status_role = self.status_role(record)
        if status_role is not None:
            roles.append(status_role)

        roles.extend(await self.team_roles(record))
        roles.extend(self.position_roles(record))

        return unique_roles(roles)

    def status_role(self, record: MembershipRecord) -> Optional[Any]:
        status = record.active_status
        if not status or status == ACTIVE_STATUS:
            return None
        return self._roles.lookup(status)

    async def team_roles(self, record: MembershipRecord) -> List[Any]:
        roles = []
        for team_id in record.team_ids:
            team_name = await self._team_names.resolve(team_id)
            role = self._roles.lookup(strip_team_suffix(team_name))
            if role is not None:
                roles.append(role)
        return roles

    def position_roles(self, record: MembershipRecord) -> List[Any]:
        roles = []
        for position in record.club_positions:
            if position == NO_ROLE_POSITION:
                continue

            if self.is_technical_lead(position):
                lead_role = self._roles.get(self._technical_lead_role_id)
                if lead_role is None:
                    logger.error("Technical lead role %s is not in the guild", self._technical_lead_role_id)
                else:
                    roles.append(lead_role)

            role = self._roles.lookup(strip_team_suffix(position))
            if role is not None:
                roles.append(role)
        return roles

    def is_technical_lead(self, position: str) -> bool:
        return self._technical_lead_regex is not None and self._technical_lead_regex.search(position) is not None
