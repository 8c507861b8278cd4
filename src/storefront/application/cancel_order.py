"""Application service: Cancel Order use case (customer and admin).

Order of operations is fixed:

1. Check the transition table for the actor (terminal orders are rejected
   without touching stock or payment).
2. Refund through the gateway when the payment was completed.  A failed or
   timed-out refund aborts the cancellation and leaves the order as it was.
3. Mark the order cancelled (payment refunded if a refund happened) and
   persist it.  The save is version-checked, so of two concurrent
   cancellations only one gets past this step.
4. Release every item's product and option stock, exactly once.

If the release fails, the order is put back into its prior state so an
order is never left cancelled while still holding stock.
"""

from __future__ import annotations

import copy

import structlog

from storefront.application.compensation import Compensations
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    EntityNotFoundError,
    RefundFailedError,
)
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import OptionSelection
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.inventory_ledger import InventoryLedger, StockLine
from storefront.domain.service.payment_gateway import PaymentGateway, PaymentGatewayTimeout

logger = structlog.get_logger(__name__)


def load_order_for(order_repo: OrderRepository, order_id: int, actor: Actor) -> Order:
    """Load an order the actor may see; other customers' orders look missing."""
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    if not actor.is_admin and order.customer_id != actor.customer_id:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        gateway: PaymentGateway,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._gateway = gateway

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        order = load_order_for(self._order_repo, order_id, actor)
        order.check_transition(OrderStatus.CANCELLED, actor)
        prior = copy.deepcopy(order)

        refunded = False
        if order.requires_refund:
            self._refund(order)
            refunded = True

        lines = [
            StockLine(
                item.product_id,
                OptionSelection.of(item.option_value_ids),
                item.quantity.value,
                label=item.product_name,
            )
            for item in order.items
        ]

        try:
            with Compensations("cancel_order") as saga:
                order.cancel(actor, refunded=refunded)
                self._order_repo.save(order)
                saga.push("restore order status", lambda: self._restore(prior, order))

                self._ledger.release_batch(lines)
        except ConcurrentUpdateError:
            logger.info("Order changed while cancelling", order_id=order_id)
            if refunded:
                logger.error(
                    "Refund issued for an order another request updated",
                    order_id=order_id,
                    transaction_ref=order.payment.transaction_ref,
                    reconcile=True,
                )
            raise
        except Exception:
            if refunded:
                logger.error(
                    "Order refunded but not cancelled",
                    order_id=order_id,
                    reconcile=True,
                )
            raise

        logger.info(
            "Order cancelled",
            order_id=order_id,
            actor=actor.role.value,
            refunded=refunded,
        )
        return order_to_dto(order)

    def _restore(self, prior: Order, cancelled: Order) -> None:
        prior.version = cancelled.version
        self._order_repo.save(prior)

    def _refund(self, order: Order) -> None:
        payment = order.payment
        try:
            result = self._gateway.refund(payment.method, payment.transaction_ref, payment.amount)
        except PaymentGatewayTimeout as exc:
            logger.error(
                "Refund timed out, outcome unknown",
                order_id=order.id,
                transaction_ref=payment.transaction_ref,
                reconcile=True,
            )
            raise RefundFailedError(
                "Refund outcome is unknown (payment gateway timed out). "
                "The order was not cancelled."
            ) from exc

        if not result.success:
            logger.error(
                "Refund rejected",
                order_id=order.id,
                transaction_ref=payment.transaction_ref,
                error=result.error,
                reconcile=True,
            )
            raise RefundFailedError(
                f"Refund failed: {result.error or 'unknown error'}. The order was not cancelled."
            )
        logger.info("Refund issued", order_id=order.id, refund_ref=result.refund_ref)
