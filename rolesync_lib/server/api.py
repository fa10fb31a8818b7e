from dataclasses import asdict
import logging

from fastapi import APIRouter, HTTPException, Request

from rolesync_lib.services.resolver import resolve_optional_service, resolve_service
from .auth import require_operator_token
from .health import get_health

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post('/sync')
@require_operator_token
async def api_sync_all(request: Request, dry_run: bool = True):
    """Run a full sweep over the members database.

    Defaults to a dry run; pass `dry_run=false` to apply role changes.
    Requires the operator token in the `X-Api-Token` header.
    """
    sync_svc = resolve_service(request, 'role_sync_service')
    if not sync_svc.ready:
        raise HTTPException(status_code=503, detail={'error': 'not_ready', 'message': 'Role sync has not started'})
    logger.info("Sweep requested over HTTP (dry_run=%s)", dry_run)
    report = await sync_svc.sync_all(dry_run=dry_run)
    return asdict(report)


@router.get('/health')
async def api_health(request: Request):
    sync_svc = resolve_optional_service(request, 'role_sync_service')
    return get_health(ready=bool(sync_svc is not None and sync_svc.ready))
