"""Abstract read-only repository for the external product catalog.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, HTTP, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import OptionType, OptionValue, Product


class CatalogRepository(ABC):

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """Return a product by ID (including soft-deleted ones), or None."""

    @abstractmethod
    def get_option_value(self, option_value_id: str) -> OptionValue | None:
        """Return an option value by ID, or None if not found."""

    @abstractmethod
    def get_option_types_for_product(self, product_id: str) -> list[OptionType]:
        """Return the option types a product defines (possibly none)."""
