import asyncio

from rolesync_lib.guild.members import MemberMatcher
from rolesync_lib.guild.role_cache import RoleNameCache
from rolesync_lib.notion.properties import decode_membership_record
from rolesync_lib.notion.team_names import TeamNameResolver
from rolesync_lib.sync.reconciler import Reconciler, preserved_roles
from rolesync_lib.sync.resolver import RecordResolver
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
OUTREACH = make_role(11, 'Outreach', position=3)
MODERATOR = make_role(20, 'Moderator', position=10)
ADMIN = make_role(21, 'Admin', position=15)
ROLES = [EVERYONE, SOFTWARE, OUTREACH, MODERATOR, ADMIN]


def _reconciler(gateway, throttle=None):
    config = make_config()
    throttle = throttle or Throttle(0)
    db = FakeDatabase(team_pages={'t-sw': team_page('t-sw', 'Software Team')})
    resolver = RecordResolver(RoleNameCache(gateway.roles()), TeamNameResolver(db, 'Name'), config)
    return Reconciler(
        gateway=gateway,
        matcher=MemberMatcher(gateway, throttle),
        resolver=resolver,
        throttle=throttle,
    )


def _record(**page):
    return decode_membership_record(member_page(**page), make_config())


def test_preserved_roles_at_or_above_bot_height():
    assert preserved_roles([SOFTWARE, MODERATOR, ADMIN], 10) == [MODERATOR, ADMIN]
    assert preserved_roles([SOFTWARE], 10) == []


def test_dry_run_returns_member_without_mutation(caplog):
    alice = make_member(1, 'alice', roles=[EVERYONE, OUTREACH])
    gateway = FakeGateway(roles=ROLES, members=[alice])
    with caplog.at_level('INFO'):
        member = asyncio.run(_reconciler(gateway).reconcile(_record(teams=['t-sw']), dry_run=True))
    assert member is alice
    assert gateway.replaced == []
    assert alice.roles == [EVERYONE, OUTREACH]
    assert 'Roles for Alice (alice): Software' in caplog.text


def test_apply_replaces_roles_and_preserves_elevated_ones():
    alice = make_member(1, 'alice', roles=[EVERYONE, OUTREACH, ADMIN])
    gateway = FakeGateway(roles=ROLES, members=[alice])
    throttle = Throttle(0)
    member = asyncio.run(_reconciler(gateway, throttle).reconcile(_record(teams=['t-sw']), dry_run=False))

    assert member is alice
    assert gateway.replaced == [(1, [SOFTWARE.id, ADMIN.id])]
    assert throttle.calls == 1


def test_role_at_bot_height_is_preserved():
    alice = make_member(1, 'alice', roles=[MODERATOR])
    gateway = FakeGateway(roles=ROLES, members=[alice])
    asyncio.run(_reconciler(gateway).reconcile(_record(), dry_run=False))
    assert gateway.replaced == []
    assert MODERATOR in alice.roles


def test_second_run_makes_no_remote_write():
    alice = make_member(1, 'alice', roles=[EVERYONE, OUTREACH])
    gateway = FakeGateway(roles=ROLES, members=[alice])
    reconciler = _reconciler(gateway)
    record = _record(teams=['t-sw'])

    asyncio.run(reconciler.reconcile(record, dry_run=False))
    asyncio.run(reconciler.reconcile(record, dry_run=False))
    assert gateway.replaced == [(1, [SOFTWARE.id])]


def test_dry_run_and_apply_log_the_same_intent(caplog):
    record = _record(teams=['t-sw'])
    logs = []
    for dry_run in (True, False):
        alice = make_member(1, 'alice', roles=[EVERYONE])
        gateway = FakeGateway(roles=ROLES, members=[alice])
        caplog.clear()
        with caplog.at_level('INFO', logger='rolesync_lib.sync.reconciler'):
            asyncio.run(_reconciler(gateway).reconcile(record, dry_run=dry_run))
        logs.append([r.getMessage() for r in caplog.records if r.getMessage().startswith('Roles for')])
    assert logs[0] == logs[1] == ['Roles for Alice (alice): Software']


def test_unmatched_record_returns_none():
    gateway = FakeGateway(roles=ROLES, members=[], cached=False)
    assert asyncio.run(_reconciler(gateway).reconcile(_record(discord='ghost'), dry_run=False)) is None
    assert gateway.replaced == []
