"""Cart aggregate — a customer's basket of line items.

A cart holds at most one line per (product, option selection). Adding a
line whose key already exists merges quantities instead of duplicating.
Stock and option validation happens in the application layer against the
inventory ledger; the aggregate only guards its own structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import OptionSelection, Quantity

LineKey = tuple[str, tuple[str, ...]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartItem:
    product_id: str
    options: OptionSelection
    quantity: Quantity

    @property
    def key(self) -> LineKey:
        return self.product_id, self.options.ids


@dataclass
class Cart:
    """Aggregate root for a customer's cart (one per customer)."""

    customer_id: str
    items: list[CartItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def key_for(product_id: str, options: OptionSelection) -> LineKey:
        return product_id, options.ids

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str, options: OptionSelection) -> CartItem | None:
        key = self.key_for(product_id, options)
        for item in self.items:
            if item.key == key:
                return item
        return None

    def quantity_of(self, product_id: str, options: OptionSelection) -> int:
        item = self.find(product_id, options)
        return item.quantity.value if item else 0

    def add(self, product_id: str, options: OptionSelection, quantity: Quantity) -> CartItem:
        """Insert a line, or merge into the line with the same key."""
        existing = self.find(product_id, options)
        if existing is not None:
            existing.quantity = existing.quantity + quantity
            self._touch()
            return existing

        item = CartItem(product_id=product_id, options=options, quantity=quantity)
        self.items.append(item)
        self._touch()
        return item

    def set_quantity(self, product_id: str, options: OptionSelection, quantity: Quantity) -> CartItem:
        item = self._require(product_id, options)
        item.quantity = quantity
        self._touch()
        return item

    def remove(self, product_id: str, options: OptionSelection) -> None:
        item = self._require(product_id, options)
        self.items.remove(item)
        self._touch()

    def drain(self) -> list[CartItem]:
        """Empty the cart and return what it held."""
        drained, self.items = self.items, []
        self._touch()
        return drained

    # --- Internal helpers -----------------------------------------------------

    def _require(self, product_id: str, options: OptionSelection) -> CartItem:
        item = self.find(product_id, options)
        if item is None:
            raise EntityNotFoundError(
                f"Product '{product_id}' with options [{options}] is not in cart"
            )
        return item

    def _touch(self) -> None:
        self.updated_at = _now()
