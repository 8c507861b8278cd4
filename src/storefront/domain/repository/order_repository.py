"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from storefront.domain.exceptions import ConcurrentUpdateError
from storefront.domain.model.order import Order, OrderStatus


@dataclass(frozen=True)
class OrderFilter:
    """Criteria for order listings; None means "any"."""

    customer_id: str | None = None
    status: OrderStatus | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    min_total: Decimal | None = None
    max_total: Decimal | None = None
    search: str | None = None  # case-insensitive match on the shipping address

    def matches(self, order: Order) -> bool:
        if self.customer_id is not None and order.customer_id != self.customer_id:
            return False
        if self.status is not None and order.status is not self.status:
            return False
        if self.created_from is not None and order.created_at < self.created_from:
            return False
        if self.created_to is not None and order.created_at > self.created_to:
            return False
        total = order.total.amount
        if self.min_total is not None and total < self.min_total:
            return False
        if self.max_total is not None and total > self.max_total:
            return False
        if self.search and self.search.lower() not in order.shipping_address.lower():
            return False
        return True


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return a new order ID.

        An ID is never handed out twice, even to concurrent callers.
        """

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def find(self, criteria: OrderFilter) -> list[Order]:
        """Return every order matching the criteria, in no particular order."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order and bump its ``version``.

        The write is refused with ConcurrentUpdateError when the stored
        version differs from ``order.version``, or when a new order (version
        0) would overwrite an existing ID.
        """


def check_version(order: Order, stored_version: int | None) -> None:
    """Refuse a write whose base version is not the stored one.

    ``stored_version`` is None when nothing is stored under ``order.id``.
    """
    if stored_version is None and order.version == 0:
        return
    if stored_version != order.version:
        raise ConcurrentUpdateError(
            f"Order #{order.id} was changed by another request. Reload it and try again."
        )
