"""Notion module: members database access and record decoding."""

from .interfaces import MembersDatabaseProtocol
from .properties import MembershipRecord, PropertyTypeError, decode_membership_record
from .team_names import TeamNameResolver

__all__ = [
    "MembersDatabaseProtocol",
    "MembershipRecord",
    "PropertyTypeError",
    "decode_membership_record",
    "TeamNameResolver",
]
