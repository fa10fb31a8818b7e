"""Bootstrap helpers for role sync startup.

This module holds the one-time startup steps: making sure
`server_config` exists, logging in to Discord and opening the Notion
client. Factoring this out keeps `rolesync_lib.main` focused on composing
services and building the FastAPI application.
"""
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple
import asyncio
import logging
import os

import discord
from notion_client import AsyncClient

from rolesync_lib.guild.gateway import DiscordGuildGateway
from rolesync_lib.notion.client import NotionMembersClient
from rolesync_lib.setup import STORE_KEY, SyncConfig, YamlConfigStore

logger = logging.getLogger(__name__)

DISCORD_TOKEN_ENV = "DISCORD_TOKEN"
NOTION_TOKEN_ENV = "NOTION_TOKEN"


def bootstrap_server(store: YamlConfigStore, logger: logging.Logger, key: str = STORE_KEY) -> SyncConfig:
    """Ensure `server_config` exists and return it.

    Parameters
    - store: YamlConfigStore over the configured storage backend
    - logger: logger instance for informational messages
    """
    if not store.exists(key):
        logger.info("server_config missing; creating default server_config.yml")
        store.save(key, SyncConfig())
    return store.load(key)


def _token(value: Optional[str], env: str) -> str:
    token = value or os.environ.get(env)
    if not token:
        raise RuntimeError(f"{env} is not set")
    return token


@asynccontextmanager
async def connect_clients(
    cfg: SyncConfig,
    discord_token: Optional[str] = None,
    notion_token: Optional[str] = None,
) -> AsyncIterator[Tuple[DiscordGuildGateway, NotionMembersClient]]:
    """Log in to Discord and open the Notion client for the configured guild.

    Yields the guild gateway and members database client once the Discord
    client is ready. Both connections are closed on exit.
    """
    discord_token = _token(discord_token, DISCORD_TOKEN_ENV)
    notion_token = _token(notion_token, NOTION_TOKEN_ENV)

    intents = discord.Intents.default()
    intents.members = True
    client = discord.Client(intents=intents)
    notion = NotionMembersClient(AsyncClient(auth=notion_token), cfg.members_database_id)

    runner = asyncio.create_task(client.start(discord_token))
    ready = asyncio.create_task(client.wait_until_ready())
    try:
        done, _ = await asyncio.wait({runner, ready}, return_when=asyncio.FIRST_COMPLETED)
        if runner in done:
            ready.cancel()
            # surfaces login failures
            runner.result()
            raise RuntimeError("Discord client stopped before it became ready")

        guild = client.get_guild(cfg.guild_id)
        if guild is None:
            raise RuntimeError(f"Guild {cfg.guild_id} not found; is the bot a member of it?")
        logger.info("Connected to guild %s as %s", guild.name, client.user)

        yield DiscordGuildGateway(client, guild), notion
    finally:
        await client.close()
        await notion.aclose()
        if not runner.done():
            runner.cancel()


async def run_sweep_once(cfg: SyncConfig, apply: bool = False) -> int:
    """Connect, run one full sweep and disconnect. Returns a process exit code."""
    from rolesync_lib.sync.service import RoleSyncService

    async with connect_clients(cfg) as (gateway, database):
        service = RoleSyncService(gateway=gateway, database=database, config=cfg)
        await service.start()
        report = await service.sync_all(dry_run=not apply)
    if report is None:
        return 1
    logger.info("Sweep report: %s", report)
    return 0
