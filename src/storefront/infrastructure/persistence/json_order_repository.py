"""JSON-file-backed implementation of OrderRepository.

The file holds ``{"last_id": n, "orders": [...]}``.  ID reservation and
saves are read-modify-write cycles under the document lock.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.order import (
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    SelectedOption,
)
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import (
    OrderFilter,
    OrderRepository,
    check_version,
)
from storefront.infrastructure.persistence.json_document import JsonDocument


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._doc = JsonDocument(file_path, default=dict)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        with self._doc.update() as doc:
            order_id = self._last_id(doc) + 1
            doc["last_id"] = order_id
        return order_id

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._doc.load().get("orders", []):
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def find(self, criteria: OrderFilter) -> list[Order]:
        orders = (self._to_domain(raw) for raw in self._doc.load().get("orders", []))
        return [o for o in orders if criteria.matches(o)]

    def save(self, order: Order) -> None:
        with self._doc.update() as doc:
            orders = doc.setdefault("orders", [])
            if order.id is None:
                order.id = self._last_id(doc) + 1
            doc["last_id"] = max(self._last_id(doc), order.id)

            index = next((i for i, raw in enumerate(orders) if raw["id"] == order.id), None)
            check_version(order, None if index is None else orders[index].get("version", 0))

            order.version += 1
            if index is None:
                orders.append(self._to_raw(order))
            else:
                orders[index] = self._to_raw(order)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _last_id(doc: dict) -> int:
        ids = [raw["id"] for raw in doc.get("orders", [])]
        return max([doc.get("last_id", 0), *ids])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "status": order.status.value,
            "address_id": order.address_id,
            "shipping_address": order.shipping_address,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "version": order.version,
            "payment": {
                "method": order.payment.method.value,
                "status": order.payment.status.value,
                "amount": str(order.payment.amount.amount),
                "transaction_ref": order.payment.transaction_ref,
            },
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "options": [
                        {
                            "option_value_id": o.option_value_id,
                            "option_type_name": o.option_type_name,
                            "value": o.value,
                            "price_delta": str(o.price_delta),
                        }
                        for o in item.options
                    ],
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = tuple(
            OrderItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                options=tuple(
                    SelectedOption(
                        option_value_id=o["option_value_id"],
                        option_type_name=o["option_type_name"],
                        value=o["value"],
                        price_delta=Decimal(o["price_delta"]),
                    )
                    for o in i.get("options", [])
                ),
            )
            for i in raw["items"]
        )
        payment = raw["payment"]
        return Order(
            id=raw["id"],
            customer_id=raw["customer_id"],
            items=items,
            address_id=raw["address_id"],
            shipping_address=raw["shipping_address"],
            payment=Payment(
                method=PaymentMethod(payment["method"]),
                status=PaymentStatus(payment["status"]),
                amount=Money(Decimal(payment["amount"])),
                transaction_ref=payment.get("transaction_ref"),
            ),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw.get("version", 0),
        )
