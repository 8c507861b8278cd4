"""Abstract repository for the external address store."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.address import Address


class AddressRepository(ABC):

    @abstractmethod
    def get(self, address_id: str, customer_id: str) -> Address | None:
        """Return the address if it exists and belongs to the customer."""
