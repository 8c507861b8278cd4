"""Application service: List Orders use case (query).

Serves both the customer's own order history and the admin listing.
Admin listings can filter by customer, status, date range, amount range
and shipping-address text, sort by creation time, total or status, and
include aggregate statistics over the whole filtered set.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from storefront.application.dto import OrderPageDTO, OrderStatsDTO, order_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.order_repository import OrderFilter, OrderRepository

MAX_PAGE_SIZE = 100

_SORT_KEYS = {
    "created_at": lambda o: o.created_at,
    "total": lambda o: o.total.amount,
    "status": lambda o: o.status.value,
}


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        criteria: OrderFilter,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        with_stats: bool = False,
    ) -> OrderPageDTO:
        if page < 1:
            raise ValidationError("Page must be at least 1")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        # Unknown sort fields fall back to newest first.
        key = _SORT_KEYS.get(sort_by)
        if key is None:
            key, sort_order = _SORT_KEYS["created_at"], "desc"

        orders = sorted(
            self._order_repo.find(criteria),
            key=lambda o: (key(o), o.id or 0),
            reverse=sort_order != "asc",
        )

        total = len(orders)
        total_pages = math.ceil(total / limit)
        start = (page - 1) * limit
        return OrderPageDTO(
            orders=[order_to_dto(o) for o in orders[start:start + limit]],
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
            stats=self._stats(orders) if with_stats else None,
        )

    @staticmethod
    def _stats(orders: list[Order]) -> OrderStatsDTO:
        breakdown = {status.value: 0 for status in OrderStatus}
        revenue = Money.zero()
        for order in orders:
            breakdown[order.status.value] += 1
            revenue = revenue + order.total

        if orders:
            average = (revenue.amount / len(orders)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        else:
            average = Decimal("0.00")

        return OrderStatsDTO(
            total_revenue=str(revenue.rounded()),
            avg_order_value=str(Money(average)),
            total_orders=len(orders),
            status_breakdown=breakdown,
        )
