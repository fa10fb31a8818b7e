import asyncio
import json

import pytest

from rolesync_lib.notion.properties import PropertyTypeError
from rolesync_lib.sync.service import RoleSyncService
from rolesync_lib.util import Throttle
from tests.helpers import (
    EVERYONE_ID,
    FakeDatabase,
    FakeGateway,
    make_config,
    make_member,
    make_role,
    member_page,
    team_page,
)

EVERYONE = make_role(EVERYONE_ID, '@everyone', position=0)
SOFTWARE = make_role(10, 'Software', position=2)


def _started():
    alice = make_member(1, 'alice', roles=[EVERYONE])
    gateway = FakeGateway(roles=[EVERYONE, SOFTWARE], members=[alice])
    database = FakeDatabase(team_pages={'t-sw': team_page('t-sw', 'Software Team')})
    svc = RoleSyncService(gateway=gateway, database=database, config=make_config(), throttle=Throttle(0))
    asyncio.run(svc.start())
    return svc, gateway, database


def _automation(page):
    return {'source': {'type': 'automation', 'automation_id': 'a-1'}, 'data': page}


def test_webhook_applies_roles_for_one_page():
    svc, gateway, database = _started()
    body = json.dumps(_automation(member_page(discord='alice', teams=['t-sw']))).encode()
    member = asyncio.run(svc.handle_webhook(body))
    assert member.id == 1
    assert gateway.replaced == [(1, [SOFTWARE.id])]
    # webhooks never run the unseen-member pass
    assert gateway.granted == []
    assert database.cursors == []


def test_parsed_dict_payload_is_accepted():
    svc, gateway, _ = _started()
    member = asyncio.run(svc.handle_webhook(_automation(member_page(discord='alice'))))
    assert member.id == 1


@pytest.mark.parametrize('body', [
    b'not json',
    b'{"source": {}}',
    b'{"data": {"object": "database", "id": "x", "properties": {}}}',
    b'[]',
])
def test_malformed_payload_makes_no_platform_calls(body, caplog):
    svc, gateway, database = _started()
    with caplog.at_level('WARNING'):
        assert asyncio.run(svc.handle_webhook(body)) is None
    assert 'Could not parse automation' in caplog.text
    assert gateway.searches == []
    assert gateway.replaced == []
    assert database.page_reads == []


def test_schema_mismatch_in_page_propagates():
    svc, gateway, _ = _started()
    page = member_page()
    page['properties']['Active'] = {'id': 'a1', 'type': 'status', 'status': {'name': 'Active'}}
    with pytest.raises(PropertyTypeError):
        asyncio.run(svc.handle_webhook(_automation(page)))
    assert gateway.replaced == []
