from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class MembersDatabaseProtocol(Protocol):
    """Protocol for the Notion surface used by the role sync.

    Responses are the raw Notion JSON objects. Errors surface as
    `notion_client.APIResponseError` so callers can inspect `.code`.
    """

    async def query_members(self, start_cursor: Optional[str] = None) -> dict:
        """Return one page of the members database query.

        The result carries `results`, `has_more` and `next_cursor`.
        """
        ...

    async def retrieve_page(self, page_id: str) -> dict:
        ...

    async def retrieve_page_property(self, page_id: str, property_id: str) -> dict:
        ...
