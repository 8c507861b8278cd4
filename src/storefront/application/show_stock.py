"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.service.inventory_ledger import InventoryLedger


@dataclass(frozen=True)
class StockLineDTO:
    key: str
    quantity: int


class ShowStockHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self) -> list[StockLineDTO]:
        levels = self._ledger.levels()
        return [
            StockLineDTO(key=str(key), quantity=quantity)
            for key, quantity in sorted(levels.items(), key=lambda kv: str(kv[0]))
        ]
