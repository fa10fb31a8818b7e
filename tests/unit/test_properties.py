import pytest

from rolesync_lib.notion.properties import (
    MembershipRecord,
    PropertyTypeError,
    decode_membership_record,
    decode_property,
)
from tests.helpers import make_config, member_page


def test_decode_membership_record():
    page = member_page(
        page_id='p-alice', discord='@Alice', status='Alumni',
        positions=['Captain', 'Programming Lead'], teams=['t-1', 't-2'],
    )
    record = decode_membership_record(page, make_config())
    assert record == MembershipRecord(
        page_id='p-alice',
        url='https://www.notion.so/p-alice',
        discord_username='@Alice',
        active_status='Alumni',
        club_positions=('Captain', 'Programming Lead'),
        team_ids=('t-1', 't-2'),
    )


def test_empty_values_decode_to_none_and_empty():
    record = decode_membership_record(member_page(discord=None, status=None), make_config())
    assert record.discord_username is None
    assert record.active_status is None
    assert record.club_positions == ()
    assert record.team_ids == ()


def test_wrong_property_type_raises():
    page = member_page()
    page['properties']['Discord'] = {'id': 'd1', 'type': 'rich_text', 'rich_text': []}
    with pytest.raises(PropertyTypeError):
        decode_membership_record(page, make_config())


def test_missing_property_raises():
    page = member_page()
    del page['properties']['Teams']
    with pytest.raises(PropertyTypeError):
        decode_membership_record(page, make_config())


def test_custom_property_names_are_used():
    page = member_page()
    page['properties']['Handle'] = page['properties'].pop('Discord')
    record = decode_membership_record(page, make_config(discord_username_property='Handle'))
    assert record.discord_username == 'alice'


def test_title_joins_plain_text():
    prop = {'id': 'title', 'type': 'title', 'title': [{'plain_text': 'Robotics '}, {'plain_text': 'Team'}]}
    assert decode_property(prop, 'title', 'Name') == 'Robotics Team'
