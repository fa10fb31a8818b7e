"""Typed decoding of Notion page properties.

Notion property values arrive as `{"id": ..., "type": <kind>, <kind>: ...}`
mappings. Each kind the role sync reads has one decoder here; asking for a
kind that does not match the stored `type` raises `PropertyTypeError`, which
callers treat as a hard fault (the database schema no longer matches the
configuration).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from rolesync_lib.setup import SyncConfig


class PropertyTypeError(TypeError):
    """A Notion property is missing or not of the expected type."""


def _plain_text(rich_text: Any) -> str:
    return "".join(part.get("plain_text", "") for part in rich_text or [])


def _select(value: Any) -> Optional[str]:
    return value.get("name") if value else None


def _multi_select(value: Any) -> Tuple[str, ...]:
    return tuple(option["name"] for option in value or [])


def _relation(value: Any) -> Tuple[str, ...]:
    return tuple(ref["id"] for ref in value or [])


def _phone_number(value: Any) -> Optional[str]:
    return value or None


_DECODERS: Dict[str, Callable[[Any], Any]] = {
    "select": _select,
    "multi_select": _multi_select,
    "relation": _relation,
    "phone_number": _phone_number,
    "title": _plain_text,
}


def decode_property(prop: Any, kind: str, name: str = "") -> Any:
    """Decode one property value of `kind`, raising on a type mismatch."""
    if not isinstance(prop, dict):
        raise PropertyTypeError(f"Property {name!r} is missing")
    actual = prop.get("type")
    if actual != kind:
        raise PropertyTypeError(f"Property {name!r} is {actual!r}, expected {kind!r}")
    return _DECODERS[kind](prop.get(kind))


def page_property(page: dict, name: str, kind: str) -> Any:
    properties = page.get("properties") or {}
    return decode_property(properties.get(name), kind, name)


@dataclass(frozen=True)
class MembershipRecord:
    page_id: str
    url: str
    discord_username: Optional[str]
    active_status: Optional[str]
    club_positions: Tuple[str, ...] = ()
    team_ids: Tuple[str, ...] = ()


def decode_membership_record(page: dict, config: SyncConfig) -> MembershipRecord:
    """Decode a members database page into a `MembershipRecord`."""
    return MembershipRecord(
        page_id=page.get("id", ""),
        url=page.get("url", ""),
        discord_username=page_property(page, config.discord_username_property, "phone_number"),
        active_status=page_property(page, config.active_property, "select"),
        club_positions=page_property(page, config.club_positions_property, "multi_select"),
        team_ids=page_property(page, config.teams_property, "relation"),
    )
