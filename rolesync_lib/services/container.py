from typing import Any, Dict


class ServiceContainer:
    """A tiny, explicit DI container for registering singletons.

    Register by key (string) and resolve via `get`. Services that only
    exist once the Discord connection is up are registered late and
    removed on shutdown, so `has` lets callers check for them without catching
    KeyError.
    """

    def __init__(self) -> None:
        self._singletons: Dict[str, Any] = {}

    def register_singleton(self, key: str, instance: Any) -> None:
        self._singletons[key] = instance

    def unregister(self, key: str) -> None:
        self._singletons.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._singletons

    def get(self, key: str) -> Any:
        if key in self._singletons:
            return self._singletons[key]
        raise KeyError(f"No service registered for key '{key}'")
