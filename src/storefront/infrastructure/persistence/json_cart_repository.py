"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.value_objects import OptionSelection, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_document import JsonDocument


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._doc = JsonDocument(file_path)

    # --- CartRepository interface ---------------------------------------------

    def get_for_customer(self, customer_id: str) -> Cart | None:
        for raw in self._doc.load():
            if raw["customer_id"] == customer_id:
                return self._to_domain(raw)
        return None

    def save(self, cart: Cart) -> None:
        with self._doc.update() as records:
            for i, raw in enumerate(records):
                if raw["customer_id"] == cart.customer_id:
                    records[i] = self._to_raw(cart)
                    break
            else:
                records.append(self._to_raw(cart))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "customer_id": cart.customer_id,
            "created_at": cart.created_at.isoformat(),
            "updated_at": cart.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "option_value_ids": list(item.options.ids),
                    "quantity": item.quantity.value,
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            customer_id=raw["customer_id"],
            items=[
                CartItem(
                    product_id=i["product_id"],
                    options=OptionSelection.of(i.get("option_value_ids", [])),
                    quantity=Quantity(i["quantity"]),
                )
                for i in raw["items"]
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
