from typing import Protocol, Any, Optional, runtime_checkable


@runtime_checkable
class RoleSyncServiceProtocol(Protocol):
    """Protocol for `RoleSyncService` public surface."""

    @property
    def ready(self) -> bool: ...

    async def start(self) -> None: ...

    def stop(self) -> None: ...

    async def sync_all(self, dry_run: bool = True) -> Optional[Any]: ...

    async def handle_webhook(self, payload: Any) -> Optional[Any]: ...
