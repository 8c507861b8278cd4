"""Application service: Update Order Status use case (admin).

Moves an order one step forward along
pending -> processing -> shipped -> completed.  Entering ``completed``
settles a pending cash payment (see PAYMENT_EFFECTS on the Order model).
A request for ``cancelled`` is routed through the cancellation use case so
refund and stock release always happen.
"""

from __future__ import annotations

import structlog

from storefront.application.cancel_order import CancelOrderHandler, load_order_for
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


def parse_status(raw: str) -> OrderStatus:
    try:
        return OrderStatus(raw.strip().lower())
    except ValueError:
        valid = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Invalid status '{raw}'. Valid statuses: {valid}") from None


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository, cancel_handler: CancelOrderHandler) -> None:
        self._order_repo = order_repo
        self._cancel_handler = cancel_handler

    def handle(self, order_id: int, new_status: str, actor: Actor) -> OrderDTO:
        target = parse_status(new_status)
        if target is OrderStatus.CANCELLED:
            return self._cancel_handler.handle(order_id, actor)

        order = load_order_for(self._order_repo, order_id, actor)
        previous = order.status
        order.advance(target, actor)
        self._order_repo.save(order)

        logger.info(
            "Order status updated",
            order_id=order_id,
            from_status=previous.value,
            to_status=target.value,
            payment_status=order.payment.status.value,
        )
        return order_to_dto(order)
