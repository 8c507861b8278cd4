"""Domain service: Inventory Ledger.

The ledger is the sole mutator of product and option-value stock. Carts
read availability through it; order creation and cancellation reserve and
release through it.  Every write is delegated to a StockRepository whose
batch operations are atomic, so a reservation either decrements every
counter it touches or none of them.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

import structlog

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ProductDeletedError,
    StockLedgerError,
    ValidationError,
)
from storefront.domain.model.value_objects import OptionSelection, StockKey
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.stock_repository import StockRepository

logger = structlog.get_logger(__name__)


class AvailabilityOutcome(Enum):
    AVAILABLE = "available"
    INSUFFICIENT = "insufficient"
    NOT_FOUND = "not_found"
    DELETED = "deleted"


@dataclass(frozen=True)
class Availability:
    outcome: AvailabilityOutcome
    available: int = 0
    requested: int = 0
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is AvailabilityOutcome.AVAILABLE

    def raise_for_outcome(self, item: str | None = None) -> None:
        """Turn a failed check into the matching domain exception."""
        if self.outcome is AvailabilityOutcome.INSUFFICIENT:
            raise InsufficientStockError(self.available, self.requested, item)
        if self.outcome is AvailabilityOutcome.DELETED:
            raise ProductDeletedError(self.detail)
        if self.outcome is AvailabilityOutcome.NOT_FOUND:
            raise EntityNotFoundError(self.detail)


@dataclass(frozen=True)
class StockLine:
    """One reservation request: a product, its options and a quantity."""

    product_id: str
    options: OptionSelection
    quantity: int
    label: str = ""

    def keys(self) -> list[StockKey]:
        return [StockKey.product(self.product_id)] + [StockKey.option(i) for i in self.options]

    @property
    def name(self) -> str:
        return self.label or self.product_id


class InventoryLedger:

    def __init__(self, catalog: CatalogRepository, stock_repo: StockRepository) -> None:
        self._catalog = catalog
        self._stock_repo = stock_repo

    # --- Reads ----------------------------------------------------------------

    def check_availability(
        self,
        product_id: str,
        option_value_ids: OptionSelection,
        quantity: int,
    ) -> Availability:
        """Return the minimum of product stock and every selected option's stock."""
        product = self._catalog.get_product(product_id)
        if product is None:
            return Availability(
                AvailabilityOutcome.NOT_FOUND, requested=quantity,
                detail=f"Product '{product_id}' not found",
            )
        if product.is_deleted:
            return Availability(
                AvailabilityOutcome.DELETED, requested=quantity,
                detail=f"Product '{product.name}' is no longer available",
            )
        for option_id in option_value_ids:
            if self._catalog.get_option_value(option_id) is None:
                return Availability(
                    AvailabilityOutcome.NOT_FOUND, requested=quantity,
                    detail=f"Option value '{option_id}' not found",
                )

        line = StockLine(product_id, option_value_ids, quantity)
        keys = line.keys()
        levels = self._stock_repo.get_levels(keys)
        missing = [k for k in keys if k not in levels]
        if missing:
            return Availability(
                AvailabilityOutcome.NOT_FOUND, requested=quantity,
                detail=f"No stock record for {missing[0]}",
            )

        available = min(levels[k] for k in keys)
        if available < quantity:
            return Availability(AvailabilityOutcome.INSUFFICIENT, available, quantity)
        return Availability(AvailabilityOutcome.AVAILABLE, available, quantity)

    def levels(self) -> dict[StockKey, int]:
        return self._stock_repo.list_all()

    # --- Writes ---------------------------------------------------------------

    def reserve(self, product_id: str, option_value_ids: OptionSelection, quantity: int) -> None:
        """Atomically decrement the product and each option counter by ``quantity``."""
        self.reserve_batch([StockLine(product_id, option_value_ids, quantity)])

    def reserve_batch(self, lines: list[StockLine]) -> None:
        """Reserve several lines as one all-or-nothing decrement.

        Quantities are summed per counter first, so two lines of the same
        product are checked against the product's stock together.
        Raises InsufficientStockError naming the first line that cannot be
        satisfied; in that case no counter has changed.
        """
        demand = self._aggregate(lines)
        try:
            shortfall = self._stock_repo.decrement_all(demand)
        except StockLedgerError:
            logger.error("Stock reservation write failed", counters=len(demand), reconcile=True)
            raise

        if shortfall is None:
            logger.info("Stock reserved", counters={str(k): q for k, q in demand.items()})
            return

        for line in lines:
            for key in line.keys():
                level = shortfall.get(key)
                if level is None:
                    raise EntityNotFoundError(f"No stock record for {key}")
                if level < demand[key]:
                    raise InsufficientStockError(level, demand[key], line.name)
        # The store reported a conflict but every counter now fits: a
        # concurrent release landed in between.  Treat as a lost race.
        raise InsufficientStockError(0, sum(line.quantity for line in lines))

    def release(self, product_id: str, option_value_ids: OptionSelection, quantity: int) -> None:
        """Atomically increment the same counters a reservation decremented."""
        self.release_batch([StockLine(product_id, option_value_ids, quantity)])

    def release_batch(self, lines: list[StockLine]) -> None:
        demand = self._aggregate(lines)
        try:
            self._stock_repo.increment_all(demand)
        except StockLedgerError:
            logger.error("Stock release write failed", counters=len(demand), reconcile=True)
            raise
        logger.info("Stock released", counters={str(k): q for k, q in demand.items()})

    def set_stock(self, key: StockKey, quantity: int) -> None:
        """Overwrite a counter. Operator use only; bypasses reservations."""
        if quantity < 0:
            raise ValidationError("Stock cannot be negative")
        self._stock_repo.set_level(key, quantity)
        logger.info("Stock level set", key=str(key), quantity=quantity)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _aggregate(lines: list[StockLine]) -> dict[StockKey, int]:
        if not lines:
            raise ValidationError("Nothing to reserve")
        demand: dict[StockKey, int] = defaultdict(int)
        for line in lines:
            if line.quantity <= 0:
                raise ValidationError("Reservation quantity must be positive")
            for key in line.keys():
                demand[key] += line.quantity
        return dict(demand)
