"""
Handle Marketplace Event Use Case

Applies monday.com marketplace webhooks: subscription changes drive the
tenant plan, BOARD_DELETED removes the board.
"""

import logging
from typing import Mapping, Optional

from context_service.app.services.board_deletion import BoardDeletion
from context_service.app.services.object_storage import IObjectStorage
from context_service.app.services.unit_of_work import UnitOfWork
from context_service.domain.base import account_key
from context_service.domain.entities import BillingStatus, PlanId
from context_service.domain.plans import parse_plan_id, plan_from_sku
from context_service.libs.result import Error, Result, Return

from .dtos import WebhookResponse
from .event_fields import (
    ACCOUNT_ID_PATHS,
    ACTIVATING_EVENTS,
    BOARD_DELETED_EVENTS,
    BOARD_ID_PATHS,
    CANCELING_EVENTS,
    PLAN_PATHS,
    SKU_PATHS,
    event_type,
    first_value,
)

logger = logging.getLogger(__name__)


class HandleMarketplaceEventUseCase:
    """
    Business Rules:
    - Activating events set the plan (SKU first, then plan fields) and billing active
    - Cancel events drop the tenant to free with billing canceled
    - Every handled billing event clears pending_plan; unknown tenants are created
    - BOARD_DELETED deletes the matching board, if any
    - Anything else is acknowledged and ignored
    """

    def __init__(
        self,
        uow: UnitOfWork,
        storage: IObjectStorage,
        sku_mapping: Optional[Mapping[str, str]] = None,
    ):
        self.uow = uow
        self.storage = storage
        self.sku_mapping = sku_mapping or {}

    async def execute(self, payload: dict) -> Result[WebhookResponse]:
        event = event_type(payload)

        if event in BOARD_DELETED_EVENTS:
            return await self._delete_board(payload, event)
        if event not in ACTIVATING_EVENTS and event not in CANCELING_EVENTS:
            logger.info("Ignoring marketplace event %r", event)
            return Return.ok(WebhookResponse(ignored=True, event=event or None))

        account = account_key(first_value(payload, ACCOUNT_ID_PATHS))
        if account is None:
            return Return.err(Error("MISSING_ACCOUNT_ID", "Event has no account id"))

        if event in CANCELING_EVENTS:
            plan = PlanId.free
            billing_status = BillingStatus.canceled
        else:
            plan = plan_from_sku(first_value(payload, SKU_PATHS), self.sku_mapping) or parse_plan_id(
                first_value(payload, PLAN_PATHS)
            )
            billing_status = BillingStatus.active
            if plan is None:
                logger.warning("Marketplace event %s for account %s names no known plan", event, account)
                return Return.ok(WebhookResponse(ignored=True, event=event))

        async with self.uow:
            tenant = await self.uow.tenants.get_or_create(account)
            tenant.plan = plan
            tenant.billing_status = billing_status
            tenant.pending_plan = None
            await self.uow.tenants.update(tenant)
            await self.uow.commit()

        logger.info("Account %s moved to plan %s (%s)", account, plan.value, event)
        return Return.ok(WebhookResponse(event=event, plan=plan.value))

    async def _delete_board(self, payload: dict, event: str) -> Result[WebhookResponse]:
        account = account_key(first_value(payload, ACCOUNT_ID_PATHS))
        board_value = first_value(payload, BOARD_ID_PATHS)
        if account is None or board_value is None:
            return Return.err(Error("MISSING_BOARD_REFERENCE", "Event has no account or board id"))

        async with self.uow:
            tenant = await self.uow.tenants.get_by_account_id(account)
            board = None
            if tenant is not None:
                board = await self.uow.boards.get_by_monday_id(tenant.id, str(board_value).strip())
            if board is None:
                return Return.ok(WebhookResponse(ignored=True, event=event))
            await BoardDeletion(self.uow, self.storage).delete(board)

        return Return.ok(WebhookResponse(event=event))
