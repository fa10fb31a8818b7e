from typing import Any
from fastapi import HTTPException
from starlette.requests import Request


def resolve_service(request: Request, name: str) -> Any:
    """Resolve a named service from the application's service container.

    Raises HTTP 503 when the service is not registered yet; the role sync
    service only appears once the Discord connection is ready.
    """
    container = getattr(request.app.state, 'container', None)
    if container is None:
        raise HTTPException(status_code=500, detail="Service container not configured")
    try:
        return container.get(name)
    except KeyError:
        raise HTTPException(status_code=503, detail=f"Service '{name}' not available")


def resolve_optional_service(request: Request, name: str) -> Any:
    """Resolve an optional service from the container, returning None if not present."""
    container = getattr(request.app.state, 'container', None)
    if container is None or not container.has(name):
        return None
    return container.get(name)
