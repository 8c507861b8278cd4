"""Application service: Confirm Payment use case.

Processor payments start as ``pending-intent``; the customer completes
them out-of-band and the resulting confirmation token (the processor's
transaction reference) is recorded here.
"""

from __future__ import annotations

import structlog

from storefront.application.cancel_order import load_order_for
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.model.actor import Actor
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class ConfirmPaymentHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, transaction_ref: str, actor: Actor) -> OrderDTO:
        order = load_order_for(self._order_repo, order_id, actor)
        order.confirm_payment(transaction_ref)
        self._order_repo.save(order)
        logger.info("Payment confirmed", order_id=order_id)
        return order_to_dto(order)
