from fastapi import Request
import logging

from rolesync_lib.services.resolver import resolve_service

logger = logging.getLogger(__name__)


async def api_members_webhook(request: Request):
    """Receive a Notion automation webhook for one updated member page.

    Registered at the configured `webhook_path` by `create_app`.
    """
    sync_svc = resolve_service(request, 'role_sync_service')
    body = await request.body()
    member = await sync_svc.handle_webhook(body)
    return {'ok': member is not None}
