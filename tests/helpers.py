from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from starlette.testclient import TestClient

from rolesync_lib.services.container import ServiceContainer
from rolesync_lib.setup import SyncConfig

EVERYONE_ID = 1
INACTIVE_ROLE_ID = 900
TECH_LEAD_ROLE_ID = 901


def register_service_on_client(client: TestClient, name: str, instance: Any) -> None:
    """Register a service instance into the app's DI container for tests.

    Usage in tests:
        from tests.helpers import register_service_on_client
        register_service_on_client(client, 'role_sync_service', fake_service)
    """
    container = getattr(client.app.state, 'container', None)
    if container is None:
        container = ServiceContainer()
        client.app.state.container = container

    container.register_singleton(name, instance)


def make_role(role_id: int, name: str, position: int = 1):
    return SimpleNamespace(id=role_id, name=name, position=position)


def make_member(member_id: int, name: str, roles=(), display_name: Optional[str] = None):
    return SimpleNamespace(id=member_id, name=name, display_name=display_name or name.title(), roles=list(roles))


def make_config(**overrides) -> SyncConfig:
    values = dict(
        guild_id=42,
        members_database_id='members-db',
        inactive_role_id=INACTIVE_ROLE_ID,
        technical_lead_role_id=TECH_LEAD_ROLE_ID,
        request_delay_seconds=0,
    )
    values.update(overrides)
    return SyncConfig(**values)


def member_page(
    page_id: str = 'page-1',
    discord: Optional[str] = 'alice',
    status: Optional[str] = 'Active',
    positions=(),
    teams=(),
) -> dict:
    """Build a members database page as returned by the Notion API."""
    return {
        'object': 'page',
        'id': page_id,
        'url': f'https://www.notion.so/{page_id}',
        'properties': {
            'Discord': {'id': 'd1', 'type': 'phone_number', 'phone_number': discord},
            'Active': {'id': 'a1', 'type': 'select', 'select': {'name': status} if status else None},
            'Club Positions': {
                'id': 'c1',
                'type': 'multi_select',
                'multi_select': [{'name': p} for p in positions],
            },
            'Teams': {'id': 't1', 'type': 'relation', 'relation': [{'id': t} for t in teams]},
        },
    }


def team_page(page_id: str, name: str, property_id: str = 'title') -> dict:
    return {
        'object': 'page',
        'id': page_id,
        'properties': {
            'Name': {'id': property_id, 'type': 'title', 'title': [{'plain_text': name}]},
        },
    }


def title_item(name: str) -> dict:
    return {
        'object': 'list',
        'results': [{'object': 'property_item', 'type': 'title', 'title': {'plain_text': name}}],
    }


class FakeGateway:
    """In-memory guild recording every remote call."""

    def __init__(self, roles=(), members=(), bot=None, cached=True):
        self._roles = list(roles)
        self.members = list(members)
        self.cached = cached
        self.bot = bot or make_member(999, 'rolebot', roles=[make_role(50, 'Bot', position=10)])
        self.searches: List[str] = []
        self.replaced: List[tuple] = []
        self.granted: List[tuple] = []

    def roles(self):
        return list(self._roles)

    def cached_members(self):
        return list(self.members) if self.cached else []

    def member_roles(self, member):
        return [role for role in member.roles if role.id != EVERYONE_ID]

    async def search_members(self, query, limit=1):
        self.searches.append(query)
        hits = [m for m in self.members if m.name.casefold().startswith(query)]
        return hits[:limit]

    async def iter_members(self):
        for member in list(self.members):
            yield member

    async def bot_member(self):
        return self.bot

    async def replace_roles(self, member, roles):
        self.replaced.append((member.id, [role.id for role in roles]))
        member.roles = list(roles)

    async def grant_role(self, member, role):
        self.granted.append((member.id, role.id))
        member.roles.append(role)


class FakeDatabase:
    """Members database serving pre-built query batches and team pages."""

    def __init__(self, batches=(), team_pages: Optional[Dict[str, dict]] = None):
        self.batches = [list(b) for b in batches]
        self.team_pages = team_pages or {}
        self.cursors: List[Optional[str]] = []
        self.page_reads: List[str] = []
        self.property_reads: List[tuple] = []
        self.property_error: Optional[Exception] = None

    async def query_members(self, start_cursor=None):
        self.cursors.append(start_cursor)
        index = int(start_cursor) if start_cursor else 0
        has_more = index + 1 < len(self.batches)
        return {
            'object': 'list',
            'results': self.batches[index] if self.batches else [],
            'has_more': has_more,
            'next_cursor': str(index + 1) if has_more else None,
        }

    async def retrieve_page(self, page_id):
        self.page_reads.append(page_id)
        return self.team_pages[page_id]

    async def retrieve_page_property(self, page_id, property_id):
        self.property_reads.append((page_id, property_id))
        if self.property_error is not None:
            raise self.property_error
        prop = self.team_pages[page_id]['properties']['Name']
        return title_item(''.join(part['plain_text'] for part in prop['title']))
