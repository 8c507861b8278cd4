"""Abstract store for the inventory ledger's stock counters.

Implementations must make ``decrement_all`` and ``increment_all`` atomic
across every counter in one call: either all counters change or none do.
This is the only serialization point between concurrent order creations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.value_objects import StockKey


class StockRepository(ABC):

    @abstractmethod
    def get_levels(self, keys: list[StockKey]) -> dict[StockKey, int]:
        """Return current levels for the keys that exist; missing keys are omitted."""

    @abstractmethod
    def decrement_all(self, quantities: dict[StockKey, int]) -> dict[StockKey, int] | None:
        """Atomically subtract every quantity if no counter would go below zero.

        Returns None on success.  On failure nothing is changed and the
        levels observed inside the failed transaction are returned.
        """

    @abstractmethod
    def increment_all(self, quantities: dict[StockKey, int]) -> None:
        """Atomically add every quantity to its counter."""

    @abstractmethod
    def set_level(self, key: StockKey, quantity: int) -> None:
        """Create or overwrite a counter (operator seeding)."""

    @abstractmethod
    def list_all(self) -> dict[StockKey, int]:
        """Return every counter."""
