"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and its payment.
Line items and prices are frozen at creation; only ``status`` and
``payment.status`` ever change, and only along the transition table below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import (
    InvalidTransitionError,
    UnauthorizedError,
    ValidationError,
)
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.value_objects import Money, Quantity, StockKey


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class PaymentMethod(Enum):
    CASH = "cash"
    PROCESSOR = "processor"


class PaymentStatus(Enum):
    PENDING = "pending"
    PENDING_INTENT = "pending-intent"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# ---------------------------------------------------------------------------
# Transition table: (from, to) -> roles allowed to perform it.
# Pairs that are absent are invalid for everyone.
# ---------------------------------------------------------------------------
TRANSITIONS: dict[tuple[OrderStatus, OrderStatus], frozenset[Role]] = {
    (OrderStatus.PENDING, OrderStatus.PROCESSING): frozenset({Role.ADMIN}),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED): frozenset({Role.ADMIN}),
    (OrderStatus.SHIPPED, OrderStatus.COMPLETED): frozenset({Role.ADMIN}),
    (OrderStatus.PENDING, OrderStatus.CANCELLED): frozenset({Role.CUSTOMER, Role.ADMIN}),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED): frozenset({Role.CUSTOMER, Role.ADMIN}),
    (OrderStatus.SHIPPED, OrderStatus.CANCELLED): frozenset({Role.ADMIN}),
}

# Payment side effects keyed by the order status being entered:
# current payment status -> new payment status.
PAYMENT_EFFECTS: dict[OrderStatus, dict[PaymentStatus, PaymentStatus]] = {
    # Cash on delivery is collected when the order completes.
    OrderStatus.COMPLETED: {PaymentStatus.PENDING: PaymentStatus.COMPLETED},
}

# Applied on cancellation only after the gateway confirmed the refund.
REFUND_EFFECT: dict[PaymentStatus, PaymentStatus] = {
    PaymentStatus.COMPLETED: PaymentStatus.REFUNDED,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SelectedOption:
    """Snapshot of one chosen option value at purchase time."""

    option_value_id: str
    option_type_name: str
    value: str
    price_delta: Decimal


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # base price + option deltas, locked at creation
    options: tuple[SelectedOption, ...] = ()

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def option_value_ids(self) -> tuple[str, ...]:
        return tuple(o.option_value_id for o in self.options)

    def stock_keys(self) -> list[StockKey]:
        """Every ledger counter this line drew from."""
        return [StockKey.product(self.product_id)] + [
            StockKey.option(i) for i in self.option_value_ids
        ]


@dataclass
class Payment:
    method: PaymentMethod
    status: PaymentStatus
    amount: Money
    transaction_ref: str | None = None


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.place()`` factory for new orders — it enforces the
    creation rules. The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_id: str
    items: tuple[OrderItem, ...]
    address_id: str
    shipping_address: str
    payment: Payment
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    version: int = 0  # bumped by the repository on every successful save

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        customer_id: str,
        items: list[OrderItem],
        address_id: str,
        shipping_address: str,
        payment: Payment,
    ) -> Order:
        if not items:
            raise ValidationError("Order must contain at least one item")
        return Order(
            id=None,
            customer_id=customer_id,
            items=tuple(items),
            address_id=address_id,
            shipping_address=shipping_address,
            payment=payment,
        )

    # --- State transitions ----------------------------------------------------

    def check_transition(self, target: OrderStatus, actor: Actor) -> None:
        """Raise unless ``actor`` may move this order to ``target`` now."""
        allowed = TRANSITIONS.get((self.status, target))
        if allowed is None:
            raise InvalidTransitionError(self.status.value, target.value, self._reason(target))
        if actor.role not in allowed:
            raise UnauthorizedError(
                f"A {actor.role.value} cannot move an order from "
                f"{self.status.value} to {target.value}"
            )
        if actor.role is Role.CUSTOMER and actor.customer_id != self.customer_id:
            raise UnauthorizedError("Order belongs to another customer")

    def advance(self, target: OrderStatus, actor: Actor) -> None:
        """Move forward along pending -> processing -> shipped -> completed."""
        if target is OrderStatus.CANCELLED:
            raise ValidationError("Use cancel() to cancel an order")
        self.check_transition(target, actor)
        self.status = target
        effect = PAYMENT_EFFECTS.get(target, {})
        if self.payment.status in effect:
            self.payment.status = effect[self.payment.status]
        self.updated_at = _now()

    def cancel(self, actor: Actor, refunded: bool) -> None:
        """Transition to CANCELLED.

        Any refund and stock release are coordinated by the application
        handler; ``refunded`` must only be True once the gateway confirmed it.
        """
        self.check_transition(OrderStatus.CANCELLED, actor)
        self.status = OrderStatus.CANCELLED
        if refunded:
            self.payment.status = REFUND_EFFECT[self.payment.status]
        self.updated_at = _now()

    def confirm_payment(self, transaction_ref: str) -> None:
        """Record the client-side confirmation of a processor payment."""
        if self.payment.status is not PaymentStatus.PENDING_INTENT:
            raise ValidationError(
                f"Payment for order #{self.id} is {self.payment.status.value}, "
                f"not awaiting confirmation"
            )
        if self.status.is_terminal:
            raise InvalidTransitionError(self.status.value, self.status.value, "order is closed")
        if transaction_ref != self.payment.transaction_ref:
            raise ValidationError("Payment confirmation does not match this order")
        self.payment.status = PaymentStatus.COMPLETED
        self.updated_at = _now()

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result.rounded()

    @property
    def requires_refund(self) -> bool:
        return self.payment.status in REFUND_EFFECT

    # --- Internal helpers -----------------------------------------------------

    def _reason(self, target: OrderStatus) -> str:
        if self.status is target:
            return f"order is already {target.value}"
        if self.status.is_terminal:
            return f"{self.status.value} is a terminal status"
        return "transitions must follow pending -> processing -> shipped -> completed"
