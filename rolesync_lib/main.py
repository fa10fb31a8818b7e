"""Application factory for the role sync FastAPI app.

This module exposes `create_app(config: Config) -> FastAPI` which performs
all heavy setup (logging, config loading, service composition and router
registration). Avoids performing side-effects at import time so tests can
construct isolated apps.

To create an app for production or local runs:

    from rolesync_lib.main import create_app, Config
    app = create_app(Config())

With `connect=False` the app starts without logging in to Discord or
Notion; tests register their own `role_sync_service` in the container.
"""
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import asyncio

from fastapi import FastAPI

from rolesync_lib.bootstrap import bootstrap_server, connect_clients
from rolesync_lib.logging_config import configure_logging
from rolesync_lib.setup import STORE_KEY, STORE_NS, YamlConfigStore
from rolesync_lib.storage import create_storage


@dataclass
class Config:
    data_dir: str = "data"
    storage_backend: str = "file"
    connect: bool = True


def create_app(config: Config) -> FastAPI:
    """Create and return a configured FastAPI application."""
    logger = configure_logging(Path(config.data_dir) / STORE_NS / f"{STORE_KEY}.yml")

    storage = create_storage(backend=config.storage_backend, data_dir=config.data_dir)
    config_store = YamlConfigStore(storage, namespace=STORE_NS)
    sync_cfg = bootstrap_server(config_store, logger)

    from rolesync_lib.services import ServiceContainer

    container = ServiceContainer()
    container.register_singleton("config_storage", storage)
    container.register_singleton("sync_config", sync_cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not config.connect:
            yield
            return

        from rolesync_lib.sync import RoleSyncService, run_periodic_sweeps

        async with connect_clients(sync_cfg) as (gateway, database):
            service = RoleSyncService(gateway=gateway, database=database, config=sync_cfg)
            await service.start()
            container.register_singleton("role_sync_service", service)

            sweeper: Optional[asyncio.Task] = None
            if sync_cfg.sweep_interval_minutes > 0:
                logger.info(
                    "Scheduling role sweeps every %d minutes (dry_run=%s)",
                    sync_cfg.sweep_interval_minutes, sync_cfg.sweep_dry_run,
                )
                sweeper = asyncio.create_task(
                    run_periodic_sweeps(service, sync_cfg.sweep_interval_minutes, dry_run=sync_cfg.sweep_dry_run)
                )
            try:
                yield
            finally:
                service.stop()
                container.unregister("role_sync_service")
                if sweeper is not None:
                    sweeper.cancel()
                    with suppress(asyncio.CancelledError):
                        await sweeper

    app = FastAPI(title="Role Sync Server", lifespan=lifespan)
    app.state.container = container

    # Router registration: import routers here to avoid import-time side-effects
    from rolesync_lib.server.api import router as server_router
    from rolesync_lib.webhook.api import api_members_webhook

    app.add_api_route(sync_cfg.webhook_path, api_members_webhook, methods=['POST'])
    app.include_router(server_router, prefix='/api')

    return app
