"""JSON-file-backed, read-only view of the product catalog.

Expected layout::

    {
      "products": [{"id": "1", "name": "Tee", "price": "20.00", "deleted": false}],
      "option_types": [{"id": "t1", "product_id": "1", "name": "Size"}],
      "option_values": [{"id": "v1", "option_type_id": "t1", "value": "M", "price_delta": "0"}]
    }
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.model.catalog import OptionType, OptionValue, Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.infrastructure.persistence.json_document import JsonDocument


def _empty_catalog() -> dict:
    return {"products": [], "option_types": [], "option_values": []}


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._doc = JsonDocument(file_path, default=_empty_catalog)

    # --- CatalogRepository interface ------------------------------------------

    def get_product(self, product_id: str) -> Product | None:
        for raw in self._doc.load().get("products", []):
            if str(raw["id"]) == product_id:
                return Product(
                    id=str(raw["id"]),
                    name=raw["name"],
                    price=Money(Decimal(str(raw["price"])), raw.get("currency", "USD")),
                    is_deleted=bool(raw.get("deleted", False)),
                )
        return None

    def get_option_value(self, option_value_id: str) -> OptionValue | None:
        for raw in self._doc.load().get("option_values", []):
            if str(raw["id"]) == option_value_id and not raw.get("deleted", False):
                return OptionValue(
                    id=str(raw["id"]),
                    option_type_id=str(raw["option_type_id"]),
                    value=raw["value"],
                    price_delta=Decimal(str(raw.get("price_delta", "0"))),
                )
        return None

    def get_option_types_for_product(self, product_id: str) -> list[OptionType]:
        return [
            OptionType(id=str(raw["id"]), product_id=str(raw["product_id"]), name=raw["name"])
            for raw in self._doc.load().get("option_types", [])
            if str(raw["product_id"]) == product_id and not raw.get("deleted", False)
        ]
