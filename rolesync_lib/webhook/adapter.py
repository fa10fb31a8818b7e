"""Turn a Notion automation webhook into a single-record role update."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Literal, Optional, Union
import json
import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from rolesync_lib.notion.properties import decode_membership_record
from rolesync_lib.setup import SyncConfig

if TYPE_CHECKING:
    from rolesync_lib.sync.reconciler import Reconciler

logger = logging.getLogger(__name__)


class AutomationPage(BaseModel):
    model_config = ConfigDict(extra='allow')

    object: Literal['page']
    id: str
    url: str = ''
    properties: Dict[str, Any]


class AutomationPayload(BaseModel):
    model_config = ConfigDict(extra='allow')

    source: Optional[Dict[str, Any]] = None
    data: AutomationPage


class WebhookAdapter:
    """Reconcile the one page carried by a webhook, applying changes.

    Payloads that are not JSON or do not carry a page object under `data`
    are logged and dropped. Decoding faults in the page's properties and
    remote errors propagate to the caller.
    """

    def __init__(self, reconciler: Reconciler, config: SyncConfig):
        self._reconciler = reconciler
        self._config = config

    def parse(self, payload: Union[bytes, str, Any]) -> Optional[AutomationPayload]:
        raw = payload
        if isinstance(payload, (bytes, str)):
            try:
                raw = json.loads(payload)
            except ValueError:
                logger.warning("Could not parse automation: %r", payload)
                return None
        try:
            return AutomationPayload.model_validate(raw)
        except ValidationError:
            logger.warning("Could not parse automation: %s", raw)
            return None

    async def handle(self, payload: Union[bytes, str, Any]) -> Optional[Any]:
        automation = self.parse(payload)
        if automation is None:
            return None

        page = automation.data.model_dump()
        logger.debug("Webhook page:\n%s", json.dumps(page, indent=2, default=str))
        record = decode_membership_record(page, self._config)
        return await self._reconciler.reconcile(record, dry_run=False)
