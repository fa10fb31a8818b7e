"""Notion members database client backed by `notion-client`."""
from __future__ import annotations
from typing import Optional
import logging

from notion_client import AsyncClient

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class NotionMembersClient:
    """Thin wrapper over `notion_client.AsyncClient` for the members database.

    Only the calls the role sync needs are exposed; errors from the SDK
    (`APIResponseError`) propagate unchanged.
    """

    def __init__(self, client: AsyncClient, members_database_id: str, page_size: int = PAGE_SIZE):
        if not members_database_id:
            raise RuntimeError("Notion members database id not configured. Set members_database_id in server_config.")
        self._client = client
        self.members_database_id = members_database_id
        self.page_size = page_size

    async def query_members(self, start_cursor: Optional[str] = None) -> dict:
        params: dict = {"database_id": self.members_database_id, "page_size": self.page_size}
        if start_cursor:
            params["start_cursor"] = start_cursor
        logger.debug("Querying members database %s (cursor=%s)", self.members_database_id, start_cursor)
        return await self._client.databases.query(**params)

    async def retrieve_page(self, page_id: str) -> dict:
        return await self._client.pages.retrieve(page_id=page_id)

    async def retrieve_page_property(self, page_id: str, property_id: str) -> dict:
        return await self._client.pages.properties.retrieve(page_id=page_id, property_id=property_id)

    async def aclose(self) -> None:
        await self._client.aclose()
