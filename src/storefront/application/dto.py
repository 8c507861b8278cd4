"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI/API and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.model.order import Order

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class CartItemDTO:
    """A cart line with its live availability."""

    product_id: str
    product_name: str
    option_value_ids: list[str]
    option_labels: list[str]  # e.g. ["Size: M", "Color: Red"]
    quantity: int
    unit_price: str
    subtotal: str
    available: int
    is_available: bool


@dataclass(frozen=True)
class CartDTO:
    customer_id: str
    items: list[CartItemDTO]
    count: int
    total_amount: str
    updated_at: str


@dataclass(frozen=True)
class OrderItemDTO:
    product_id: str
    product_name: str
    option_labels: list[str]
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_id: str
    status: str
    payment_method: str
    payment_status: str
    items: list[OrderItemDTO]
    total: str
    shipping_address: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class PlacedOrderDTO:
    """Result of checkout; ``client_secret`` is set for processor payments."""

    order: OrderDTO
    client_secret: str | None = None


@dataclass(frozen=True)
class OrderStatsDTO:
    total_revenue: str
    avg_order_value: str
    total_orders: int
    status_breakdown: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
    stats: OrderStatsDTO | None = None


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        status=order.status.value,
        payment_method=order.payment.method.value,
        payment_status=order.payment.status.value,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                option_labels=[f"{o.option_type_name}: {o.value}" for o in item.options],
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total),
        shipping_address=order.shipping_address,
        created_at=order.created_at.strftime(TIMESTAMP_FORMAT),
        updated_at=order.updated_at.strftime(TIMESTAMP_FORMAT),
    )
