"""Role name lookups over a snapshot of the guild's roles."""
from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
import logging

logger = logging.getLogger(__name__)


class RoleNameCache:
    """Map role display names and ids to roles.

    Built once from the guild's role list; there is no live refresh, so a
    role created or renamed after startup is only seen after a restart.
    When two roles share a name the later one in the listing wins.
    """

    def __init__(self, roles: Iterable[Any]):
        self._by_name: Dict[str, Any] = {}
        self._by_id: Dict[int, Any] = {}
        for role in roles:
            self._by_name[role.name] = role
            self._by_id[role.id] = role
        logger.debug("Cached %d guild roles", len(self._by_id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def lookup(self, name: str) -> Optional[Any]:
        role = self._by_name.get(name)
        if role is None:
            logger.warning("Could not find role with name: %s", name)
        return role

    def get(self, role_id: int) -> Optional[Any]:
        return self._by_id.get(role_id)
