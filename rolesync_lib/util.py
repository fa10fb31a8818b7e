import asyncio
from typing import Any, Iterable, List

TEAM_SUFFIX = " Team"


def strip_team_suffix(name: str) -> str:
    """Drop one trailing " Team" so "Robotics Team" maps to the "Robotics" role."""
    if name.endswith(TEAM_SUFFIX):
        return name[: -len(TEAM_SUFFIX)]
    return name


def unique_roles(roles: Iterable[Any]) -> List[Any]:
    """Return roles de-duplicated by id, keeping the first occurrence."""
    seen = set()
    out = []
    for role in roles:
        if role.id in seen:
            continue
        seen.add(role.id)
        out.append(role)
    return out


class Throttle:
    """Fixed delay after each remote call to stay under platform rate limits."""

    def __init__(self, delay_seconds: float = 0.333):
        self.delay_seconds = delay_seconds
        self.calls = 0

    async def wait(self) -> None:
        self.calls += 1
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
