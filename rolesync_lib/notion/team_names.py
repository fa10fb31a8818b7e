"""Team page name lookups with a cached title property id."""
from __future__ import annotations
from typing import Optional
import logging

from notion_client import APIErrorCode, APIResponseError

from rolesync_lib.notion.interfaces import MembersDatabaseProtocol
from rolesync_lib.notion.properties import PropertyTypeError, decode_property

logger = logging.getLogger(__name__)


class TeamNameResolver:
    """Resolve a team relation page id to the team's display name.

    The property-item endpoint is cheap but only addressable by property
    id, and the schema exposes names, not ids. The first lookup therefore
    reads the whole team page, remembers the id of the configured title
    property and later lookups go straight to the property item. A
    not-found answer on that fast path drops back to the full page read and
    re-caches the id; any other API error propagates.
    """

    def __init__(self, database: MembersDatabaseProtocol, team_name_property: str):
        self._database = database
        self._team_name_property = team_name_property
        self.property_id: Optional[str] = None

    async def resolve(self, page_id: str) -> str:
        if self.property_id is not None:
            try:
                item = await self._database.retrieve_page_property(page_id, self.property_id)
                return self._title_from_item(item)
            except APIResponseError as exc:
                if exc.code != APIErrorCode.ObjectNotFound:
                    raise
                logger.info("Cached team name property %s not found; refetching team page %s", self.property_id, page_id)

        page = await self._database.retrieve_page(page_id)
        prop = (page.get("properties") or {}).get(self._team_name_property)
        name = decode_property(prop, "title", self._team_name_property)
        self.property_id = prop["id"]
        return name

    def invalidate(self) -> None:
        self.property_id = None

    @staticmethod
    def _title_from_item(item: dict) -> str:
        results = item.get("results") if item.get("object") == "list" else [item]
        parts = []
        for entry in results or []:
            if entry.get("type") != "title":
                raise PropertyTypeError(f"Team name property item is {entry.get('type')!r}, expected 'title'")
            parts.append(entry["title"].get("plain_text", ""))
        return "".join(parts)
