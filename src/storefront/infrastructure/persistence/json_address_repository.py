"""JSON-file-backed, read-only view of the customer address store."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.address import Address
from storefront.domain.repository.address_repository import AddressRepository
from storefront.infrastructure.persistence.json_document import JsonDocument


class JsonAddressRepository(AddressRepository):

    def __init__(self, file_path: Path) -> None:
        self._doc = JsonDocument(file_path)

    def get(self, address_id: str, customer_id: str) -> Address | None:
        for raw in self._doc.load():
            if str(raw["id"]) == address_id and raw["customer_id"] == customer_id:
                return Address(
                    id=str(raw["id"]),
                    customer_id=raw["customer_id"],
                    street=raw["street"],
                    city=raw["city"],
                    state=raw["state"],
                    zip_code=raw["zip_code"],
                )
        return None
