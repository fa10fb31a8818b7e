"""RoleSyncService: owns the role sync components for one guild connection."""
from __future__ import annotations
from typing import Any, Optional
import asyncio
import logging

from rolesync_lib.guild.interfaces import GuildGatewayProtocol
from rolesync_lib.guild.members import MemberMatcher
from rolesync_lib.guild.role_cache import RoleNameCache
from rolesync_lib.notion.interfaces import MembersDatabaseProtocol
from rolesync_lib.notion.team_names import TeamNameResolver
from rolesync_lib.setup import SyncConfig
from rolesync_lib.sync.interfaces import RoleSyncServiceProtocol
from rolesync_lib.sync.reconciler import Reconciler
from rolesync_lib.sync.resolver import RecordResolver
from rolesync_lib.sync.sweep import SweepDriver, SweepReport
from rolesync_lib.util import Throttle
from rolesync_lib.webhook.adapter import WebhookAdapter

logger = logging.getLogger(__name__)


class RoleSyncService(RoleSyncServiceProtocol):
    """Compose the role sync around a connected guild and members database.

    `start` snapshots the guild roles into the role name cache and wires
    the resolvers, reconciler, sweep driver and webhook adapter. Calls made
    before `start` (or webhooks after `stop`) are logged and ignored. Full
    sweeps run one at a time; a sweep requested while another is running
    waits for it to finish.
    """

    def __init__(
        self,
        *,
        gateway: GuildGatewayProtocol,
        database: MembersDatabaseProtocol,
        config: SyncConfig,
        throttle: Optional[Throttle] = None,
    ):
        self._gateway = gateway
        self._database = database
        self._config = config
        self.throttle = throttle or Throttle(config.request_delay_seconds)
        self.role_cache: Optional[RoleNameCache] = None
        self.team_names: Optional[TeamNameResolver] = None
        self.reconciler: Optional[Reconciler] = None
        self.sweeper: Optional[SweepDriver] = None
        self.webhooks: Optional[WebhookAdapter] = None
        self._listening = False
        self._sweep_lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self.reconciler is not None

    async def start(self) -> None:
        self.role_cache = RoleNameCache(self._gateway.roles())
        self.team_names = TeamNameResolver(self._database, self._config.team_name_property)
        matcher = MemberMatcher(self._gateway, self.throttle)
        resolver = RecordResolver(self.role_cache, self.team_names, self._config)
        self.reconciler = Reconciler(
            gateway=self._gateway,
            matcher=matcher,
            resolver=resolver,
            throttle=self.throttle,
        )
        self.sweeper = SweepDriver(
            database=self._database,
            gateway=self._gateway,
            reconciler=self.reconciler,
            role_cache=self.role_cache,
            config=self._config,
            throttle=self.throttle,
        )
        self.webhooks = WebhookAdapter(self.reconciler, self._config)
        self._listening = True
        logger.info("Role sync started with %d cached roles", len(self.role_cache))

    def stop(self) -> None:
        self._listening = False
        logger.info("Role sync stopped listening for webhooks")

    async def sync_all(self, dry_run: bool = True) -> Optional[SweepReport]:
        if self.sweeper is None:
            logger.warning("Role sync not started; skipping sweep")
            return None
        if self._sweep_lock.locked():
            logger.info("Sweep already running; waiting for it to finish")
        async with self._sweep_lock:
            return await self.sweeper.sweep_all(dry_run=dry_run)

    async def handle_webhook(self, payload: Any) -> Optional[Any]:
        if self.webhooks is None or not self._listening:
            logger.warning("Role sync not listening; dropping webhook")
            return None
        return await self.webhooks.handle(payload)


async def run_periodic_sweeps(service: RoleSyncServiceProtocol, interval_minutes: float, dry_run: bool = True) -> None:
    """Run `sync_all` every `interval_minutes` until cancelled.

    A failing sweep is logged and the loop carries on with the next one.
    """
    while True:
        await asyncio.sleep(interval_minutes * 60)
        try:
            await service.sync_all(dry_run=dry_run)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Periodic role sweep failed")
