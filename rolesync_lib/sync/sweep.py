"""Full sweep over the members database followed by inactivity marking."""
from __future__ import annotations
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Set
import logging

from rolesync_lib.guild.interfaces import GuildGatewayProtocol
from rolesync_lib.guild.role_cache import RoleNameCache
from rolesync_lib.notion.interfaces import MembersDatabaseProtocol
from rolesync_lib.notion.properties import decode_membership_record
from rolesync_lib.setup import SyncConfig
from rolesync_lib.sync.reconciler import Reconciler
from rolesync_lib.util import Throttle

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    dry_run: bool
    records: int = 0
    matched: int = 0
    unseen: int = 0
    marked_inactive: int = 0


class SweepDriver:
    """Reconcile every membership record, then flag members no record matched.

    Pass one walks the database page by page and reconciles each record,
    collecting the ids of the members it matched. Pass two lists the whole
    guild and grants the inactive role to everyone not collected. Errors
    from reconciliation are not caught here and abort the sweep.
    """

    def __init__(
        self,
        *,
        database: MembersDatabaseProtocol,
        gateway: GuildGatewayProtocol,
        reconciler: Reconciler,
        role_cache: RoleNameCache,
        config: SyncConfig,
        throttle: Throttle,
    ):
        self._database = database
        self._gateway = gateway
        self._reconciler = reconciler
        self._roles = role_cache
        self._config = config
        self._throttle = throttle

    async def iter_pages(self) -> AsyncIterator[dict]:
        cursor: Optional[str] = None
        while True:
            response = await self._database.query_members(cursor)
            for page in response.get("results", []):
                yield page
            cursor = response.get("next_cursor")
            if not response.get("has_more") or not cursor:
                break

    async def sweep_all(self, dry_run: bool = True) -> SweepReport:
        inactive_role = self._roles.get(self._config.inactive_role_id)
        if inactive_role is None:
            raise RuntimeError(f"Inactive role {self._config.inactive_role_id} is not in the guild")

        report = SweepReport(dry_run=dry_run)
        processed: Set[int] = set()

        async for page in self.iter_pages():
            await self._throttle.wait()
            report.records += 1
            record = decode_membership_record(page, self._config)
            member = await self._reconciler.reconcile(record, dry_run=dry_run)
            if member is not None:
                processed.add(member.id)
        report.matched = len(processed)

        logger.info("Members with no notion page:")
        async for member in self._gateway.iter_members():
            if member.id in processed:
                continue
            report.unseen += 1
            logger.info("%s (%s)", member.display_name, member.name)
            has_inactive = any(role.id == inactive_role.id for role in self._gateway.member_roles(member))
            if not dry_run and not has_inactive:
                await self._gateway.grant_role(member, inactive_role)
                report.marked_inactive += 1
                await self._throttle.wait()

        logger.info(
            "Sweep finished (dry_run=%s): %d records, %d matched, %d unseen, %d marked inactive",
            dry_run, report.records, report.matched, report.unseen, report.marked_inactive,
        )
        return report
