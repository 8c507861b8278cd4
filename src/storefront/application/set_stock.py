"""Application service: Set Stock use case.

Seeds or overwrites a product or option-value stock counter.  The entity
must exist in the catalog.
"""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import StockKey
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.inventory_ledger import InventoryLedger


class SetStockHandler:

    def __init__(self, ledger: InventoryLedger, catalog: CatalogRepository) -> None:
        self._ledger = ledger
        self._catalog = catalog

    def handle(self, key: StockKey, quantity: int) -> None:
        if key.kind == "product":
            found = self._catalog.get_product(key.entity_id) is not None
        else:
            found = self._catalog.get_option_value(key.entity_id) is not None
        if not found:
            raise EntityNotFoundError(f"No catalog entry for {key}")

        self._ledger.set_stock(key, quantity)
